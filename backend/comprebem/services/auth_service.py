# backend/comprebem/services/auth_service.py
"""
Servicio de autenticación de la consola.

Expone la interfaz mínima que necesita el resto de la aplicación:
obtener la sesión actual, iniciar y cerrar sesión, y suscribirse a los
cambios de sesión. Las credenciales solo se comparan aquí, contra el
administrador configurado en settings (email y hash de la contraseña); el
resto del código solo ve tokens.

Las sesiones son JWT firmados con caducidad (`exp`), así que no se guardan
en el servidor. Al cerrar sesión el `jti` del token pasa a una lista de
revocados que se purga en cuanto los tokens revocados caducan.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from comprebem.core.config import Settings
from comprebem.core.exceptions import AuthenticationError
from comprebem.core.security import create_access_token, decode_access_token, verify_password

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


class AuthSession(BaseModel):
    """Sesión activa de la consola."""
    access_token: str
    email: str
    created_at: datetime
    expires_at: datetime


SessionListener = Callable[[str, Optional[AuthSession]], None]


class AuthService:
    """
    Autenticación del administrador de la consola con tokens JWT.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._revoked: Dict[str, datetime] = {}
        self._listeners: List[SessionListener] = []

    def _notify(self, event: str, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    def _purge_revoked(self) -> None:
        now = datetime.now(timezone.utc)
        self._revoked = {jti: exp for jti, exp in self._revoked.items() if exp > now}

    def get_session(self, token: Optional[str]) -> Optional[AuthSession]:
        """Devuelve la sesión del token, o None si no es válido, caducó o se cerró."""
        if not token:
            return None
        claims = decode_access_token(token, self.settings.SECRET_KEY, self.settings.ALGORITHM)
        if claims is None or claims.get("jti") in self._revoked:
            return None
        if claims.get("sub") != self.settings.CONSOLE_ADMIN_EMAIL:
            return None
        return AuthSession(
            access_token=token,
            email=claims["sub"],
            created_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Inicia sesión con email y contraseña. Lanza AuthenticationError si no coinciden."""
        email_ok = email.strip().lower() == self.settings.CONSOLE_ADMIN_EMAIL.lower()
        password_ok = verify_password(password, self.settings.CONSOLE_ADMIN_PASSWORD_HASH)
        if not (email_ok and password_ok):
            logger.warning(f"⚠️ AUTH: Intento de acceso fallido para '{email}'")
            raise AuthenticationError("Email o contraseña incorrectos")

        now = datetime.now(timezone.utc).replace(microsecond=0)
        token = create_access_token(
            subject=self.settings.CONSOLE_ADMIN_EMAIL,
            secret_key=self.settings.SECRET_KEY,
            algorithm=self.settings.ALGORITHM,
            expires_delta=timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            now=now,
        )
        session = AuthSession(
            access_token=token,
            email=self.settings.CONSOLE_ADMIN_EMAIL,
            created_at=now,
            expires_at=now + timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        logger.info(f"✅ AUTH: Sesión iniciada para '{session.email}'")
        self._notify(SIGNED_IN, session)
        return session

    def sign_out(self, token: str) -> None:
        """Revoca el token. Cerrar una sesión inválida o ya cerrada no hace nada."""
        session = self.get_session(token)
        if session is None:
            return
        claims = decode_access_token(token, self.settings.SECRET_KEY, self.settings.ALGORITHM)
        self._purge_revoked()
        self._revoked[claims["jti"]] = session.expires_at
        logger.info(f"👋 AUTH: Sesión cerrada para '{session.email}'")
        self._notify(SIGNED_OUT, None)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Registra un listener de cambios de sesión. Devuelve la función que
        cancela la suscripción.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
