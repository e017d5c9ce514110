# backend/comprebem/db/database.py

"""
Configuración principal de la base de datos para la aplicación.

Este módulo establece la conexión con PostgreSQL usando SQLAlchemy y define
los componentes básicos que serán utilizados por toda la aplicación:
- Motor de base de datos (engine)
- Fábrica de sesiones (AsyncSessionLocal)
- Clase base para modelos (Base)

La dependencia get_db() para FastAPI vive en comprebem/api/deps.py.
"""

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from comprebem.core.config import settings

# Crear el motor de base de datos asíncrono
engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)

# expire_on_commit=False mantiene los objetos utilizables después del commit.
# Los pedidos se escriben en varios pasos y se leen de nuevo al terminar.
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Clase base declarativa para todos los modelos ORM
Base = declarative_base()


async def create_tables() -> None:
    """Crea las tablas que no existan. Solo para desarrollo (AUTO_CREATE_TABLES)."""
    # Importa los modelos para registrarlos en Base.metadata
    from comprebem.db.models import client_model, product_model, order_model  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
