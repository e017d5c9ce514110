# backend/comprebem/core/config.py
"""
Este archivo contiene la configuración de la aplicación.
"""

from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path
import os

# Apunta al directorio 'backend/'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic BaseSettings.
    Variables sensibles desde .env, defaults seguros para el resto.
    """
    # Configuración general del proyecto
    BASE_DIR: Path = BASE_DIR
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "CompreBem API"
    PROJECT_VERSION: str = "0.1.0"
    STORE_NAME: str = "Mercado CompreBem"

    # Configuración de la base de datos
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "postgres")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "user")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "comprebem_db")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")

    # Permite apuntar a otra base (p. ej. sqlite+aiosqlite en desarrollo)
    DATABASE_URL_OVERRIDE: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        """URL de conexión a la base de datos asíncrona."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Crea las tablas al arrancar (útil en desarrollo, en producción se usan migraciones)
    AUTO_CREATE_TABLES: bool = False

    # Pedidos: escritura atómica de pedido + líneas en una sola transacción.
    # En False se reproduce la secuencia paso a paso (un commit por paso).
    ORDER_WRITES_ATOMIC: bool = True

    # Dashboard y catálogo
    EXPIRING_SOON_DAYS: int = 7
    RECENT_ORDERS_LIMIT: int = 5

    # Acceso a la consola - REQUERIDO del .env (sensible)
    CONSOLE_ADMIN_EMAIL: str = "admin@comprebem.com.br"
    # Hash de passlib, p. ej. generado con comprebem.core.security.get_password_hash
    CONSOLE_ADMIN_PASSWORD_HASH: str

    # Tokens de sesión JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Logging - Defaults seguros
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Server - Del .env con defaults
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False

# Instancia global de la configuración
settings = Settings()
