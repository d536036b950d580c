# directorio/database.py

import logging
import sys
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, JSON, create_engine
from sqlalchemy.dialects.postgresql import JSONB

from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from directorio.core.config import DATABASE_URL

logger = logging.getLogger(__name__)

# *****************************************************************
# 1. Motor de base de datos
# *****************************************************************
if not DATABASE_URL:
    logger.critical("La variable de entorno 'DATABASE_URL' no se encontró.")
    sys.exit(1)

if DATABASE_URL.startswith("sqlite"):
    # SQLite en memoria (pruebas / desarrollo local) necesita una sola conexión compartida
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

# 2. Crear la Clase SessionLocal
# Esta es la clase que se usará para cada solicitud (request) a la API.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 3. Crear la Clase Base
# Esta será la clase base de la que heredarán todos nuestros modelos/tablas.
Base = declarative_base()

# JSONB en PostgreSQL, JSON genérico en los demás motores
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Columnas created_at / updated_at presentes en todas las tablas."""
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


# Función de dependencia (Dependency Injection) para obtener una sesión de DB
def get_db():
    """Provee una sesión de base de datos a un endpoint de FastAPI."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
