# backend/comprebem/api/deps.py
"""
Módulo de dependencias para FastAPI.

Centraliza las dependencias inyectables en los endpoints: sesión de base de
datos, repositorio, servicio de autenticación y sesión de la consola.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from comprebem.core.config import settings
from comprebem.db.database import AsyncSessionLocal
from comprebem.services.auth_service import AuthService, AuthSession
from comprebem.services.repository import EntityRepository

bearer_scheme = HTTPBearer(auto_error=False, description="Token obtenido en /auth/sign-in")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos asíncrona.
    Se asegura de que la sesión se cierre siempre después de la petición.
    """
    async with AsyncSessionLocal() as session:
        yield session


def get_repository(db: AsyncSession = Depends(get_db)) -> EntityRepository:
    return EntityRepository(db, atomic_order_writes=settings.ORDER_WRITES_ATOMIC)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthSession:
    """Exige una sesión válida en la cabecera Authorization: Bearer <token>."""
    session = auth_service.get_session(credentials.credentials if credentials else None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sesión no válida o expirada",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session
