# backend/comprebem/core/security.py
"""
Utilidades de seguridad: hash de contraseñas y tokens de acceso JWT.

No lee settings: la clave, el algoritmo y la caducidad los pasa quien llama
(AuthService), así los hashes se pueden generar sin configurar la aplicación.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

# pbkdf2_sha256 para hashes nuevos; bcrypt se acepta al verificar hashes existentes
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Comprueba una contraseña contra su hash. Un hash ilegible cuenta como no válido."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(
    subject: str,
    secret_key: str,
    algorithm: str,
    expires_delta: timedelta,
    now: Optional[datetime] = None,
) -> str:
    """
    Genera un JWT firmado con `sub`, `iat`, `exp` y un `jti` único que
    identifica la sesión (se usa para revocarla al cerrar sesión).
    """
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "sub": subject,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str) -> Optional[Dict[str, Any]]:
    """Devuelve los claims de un token válido y no caducado, o None."""
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None
