# backend/comprebem/api/v1/endpoints/auth.py
"""
Endpoints de inicio y cierre de sesión de la consola.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from comprebem.api import deps
from comprebem.core.exceptions import AuthenticationError
from comprebem.schemas.auth_schema import SessionResponse, SignInRequest
from comprebem.services.auth_service import AuthService, AuthSession

router = APIRouter()


@router.post("/sign-in", response_model=SessionResponse)
async def sign_in(
    credentials: SignInRequest,
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> SessionResponse:
    """Inicia sesión y devuelve el token para la cabecera Authorization."""
    try:
        session = auth_service.sign_in(credentials.email, credentials.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return SessionResponse(**session.model_dump())


@router.get("/session", response_model=SessionResponse)
async def read_session(session: AuthSession = Depends(deps.get_current_session)) -> SessionResponse:
    """Devuelve la sesión actual."""
    return SessionResponse(**session.model_dump())


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    session: AuthSession = Depends(deps.get_current_session),
    auth_service: AuthService = Depends(deps.get_auth_service),
) -> None:
    auth_service.sign_out(session.access_token)
