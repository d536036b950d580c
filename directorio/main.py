# directorio/main.py
# type: ignore

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from directorio.core.config import CORS_ORIGINS, LOG_LEVEL, UPLOAD_DIR
from directorio.core.logger import setup_logging

setup_logging(LOG_LEVEL)

from directorio.database import Base, engine

# ***************************************************************
# 1. Importar todos los modelos para que SQLAlchemy los registre
# ***************************************************************
import directorio.models.auth  # User, Role
import directorio.models.catalog  # Category, MembershipType, Certificate
import directorio.models.platform  # Company
import directorio.models.opinion  # Opinion
import directorio.models.payment  # MembershipPayment
import directorio.models.settings  # SystemSettings

# ***************************************************************
# 2. Importar los Routers de API
# ***************************************************************
from directorio.api.endpoints import auth
from directorio.api.endpoints import users
from directorio.api.endpoints import roles
from directorio.api.endpoints import categories
from directorio.api.endpoints import membership_types
from directorio.api.endpoints import certificates
from directorio.api.endpoints import companies
from directorio.api.endpoints import opinions
from directorio.api.endpoints import payments
from directorio.api.endpoints import system_settings
from directorio.api.endpoints import statistics
from directorio.api.endpoints import uploads

logger = logging.getLogger(__name__)

# Inicializar la aplicación FastAPI
app = FastAPI(
    title="Directorio Empresarial API",
    version="v1",
    description="Backend del directorio de empresas: fichas, membresías, certificados, opiniones y pagos.",
)


def create_tables():
    """Crea todas las tablas de la base de datos si no existen."""
    Base.metadata.create_all(bind=engine)


create_tables()

if CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# ***************************************************************
# 3. Incluir los Routers
# ***************************************************************

# Autenticación y usuarios
app.include_router(auth.router, tags=["Auth"], prefix="/api/auth")
app.include_router(users.router, tags=["Users"], prefix="/api/users")
app.include_router(roles.router, tags=["Roles"], prefix="/api/roles")

# Catálogos
app.include_router(categories.router, tags=["Categories"], prefix="/api/categories")
app.include_router(membership_types.router, tags=["Membership Types"], prefix="/api/membership-types")
app.include_router(certificates.router, tags=["Certificates"], prefix="/api/certificates")

# Directorio
app.include_router(companies.router, tags=["Companies"], prefix="/api/companies")
app.include_router(opinions.router, tags=["Opinions"], prefix="/api/opinions")

# Pagos de membresía
app.include_router(payments.router, tags=["Payments"], prefix="/api/payments")

# Administración
app.include_router(system_settings.router, tags=["System Settings"], prefix="/api/system-settings")
app.include_router(statistics.router, tags=["Statistics"], prefix="/api/statistics")
app.include_router(uploads.router, tags=["Uploads"], prefix="/api/uploads")

# Archivos subidos
os.makedirs(UPLOAD_DIR, exist_ok=True)
app.mount(uploads.PUBLIC_PREFIX, StaticFiles(directory=UPLOAD_DIR), name="uploads")


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok"}


logger.info("API del directorio lista (%s rutas)", len(app.router.routes))
