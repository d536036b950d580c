# directorio/models/auth.py
# type: ignore

from sqlalchemy import Column, Integer, String, Boolean, Text
from sqlalchemy.orm import relationship
from directorio.database import Base, TimestampMixin, JSONType


# Roles de usuario que controlan el acceso a la API
ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLE_REPRESENTATIVE = "representante"
USER_ROLES = (ROLE_ADMIN, ROLE_USER, ROLE_REPRESENTATIVE)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # UID del proveedor de identidad (espejo de la identidad externa)
    provider_uid = Column(String(128), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255), nullable=True)
    photo_url = Column(Text, nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_USER)

    # Solo para cuentas de email/contraseña gestionadas localmente
    password_hash = Column(String(255), nullable=True)
    stripe_customer_id = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    companies = relationship("Company", back_populates="owner")


class Role(TimestampMixin, Base):
    """
    Catálogo administrativo de conjuntos de permisos.
    Independiente de User.role.
    """
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(100), index=True, unique=True, nullable=False)
    descripcion = Column(Text, nullable=True)
    permisos = Column(JSONType, nullable=False, default=list)
    estado = Column(String(20), nullable=False, default="activo")
