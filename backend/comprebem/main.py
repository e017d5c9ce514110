# backend/comprebem/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Configura la aplicación de la consola CompreBem: registro de rutas,
traducción de errores de dominio a respuestas HTTP, servicio de
autenticación compartido y eventos del ciclo de vida.
"""

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from comprebem.api.v1.api_router import api_router_v1
from comprebem.core.config import settings
from comprebem.core.exceptions import (
    DraftError,
    NotFoundError,
    OrderValidationError,
    PartialWriteError,
    RepositoryError,
)
from comprebem.core.logging_config import setup_logging
from comprebem.services.auth_service import AuthService

logger = logging.getLogger(__name__)

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    description="API de la consola de gestión de CompreBem"
)

# Servicio de autenticación único para toda la aplicación (sesiones en memoria)
app.state.auth_service = AuthService(settings)

# ========================================
# REGISTRO DE ROUTERS DE LA API
# ========================================

app.include_router(api_router_v1, prefix=settings.API_V1_STR)

# ========================================
# MANEJADORES DE ERRORES DE DOMINIO
# ========================================

@app.exception_handler(OrderValidationError)
async def order_validation_error_handler(request: Request, exc: OrderValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "rule": exc.rule.value},
    )


@app.exception_handler(DraftError)
async def draft_error_handler(request: Request, exc: DraftError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(RepositoryError)
async def repository_error_handler(request: Request, exc: RepositoryError):
    content = {"detail": str(exc), "operation": exc.operation}
    if isinstance(exc, PartialWriteError):
        content["completed_steps"] = exc.completed_steps
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# ========================================
# ENDPOINTS RAÍZ Y VERIFICACIÓN DE ESTADO
# ========================================

@app.get("/", tags=["Root"])
async def read_root():
    """
    Endpoint raíz para verificación básica del estado de la API.

    Example:
        GET /
        Response: {"message": "Bienvenido a CompreBem API v0.1.0"}
    """
    return {"message": f"Bienvenido a {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}"}

# ========================================
# EVENTOS DEL CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@app.on_event("startup")
async def startup_event():
    """
    Evento ejecutado al iniciar la aplicación.

    Configura el logging y, en desarrollo, crea las tablas que falten.
    """
    setup_logging()
    logger.info(f"🚀 {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} iniciando")
    if settings.AUTO_CREATE_TABLES:
        from comprebem.db.database import create_tables

        await create_tables()
        logger.info("✅ Tablas de la base de datos verificadas")


def run() -> None:
    """Arranca el servidor con el host y el puerto de settings."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
