# backend/comprebem/core/logging_config.py
"""
Configuración centralizada del logging de la aplicación.

Todos los módulos usan `logging.getLogger(__name__)`; aquí solo se configura
el logger raíz (nivel, formato y salida por consola) a partir de settings.
"""

import logging
import sys

from comprebem.core.config import settings


def setup_logging() -> None:
    """
    Configura el logger raíz con el nivel y el formato definidos en settings.

    Elimina los handlers previos para evitar mensajes duplicados si se
    llama más de una vez (p. ej. con recarga automática de uvicorn).
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(settings.LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    root_logger.addHandler(console_handler)

    # SQLAlchemy es muy verboso en INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.info(f"📝 Logging configurado con nivel {settings.LOG_LEVEL}")
