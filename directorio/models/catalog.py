# directorio/models/catalog.py
# type: ignore

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from directorio.database import Base, TimestampMixin, JSONType


VISIBILITY_PUBLIC = "publica"
VISIBILITY_PRIVATE = "privada"


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    nombre_categoria = Column(String(150), nullable=False)
    descripcion = Column(Text, nullable=True)
    icono = Column(String(100), nullable=True, default="Tag")  # nombre de icono
    icono_url = Column(Text, nullable=True)  # icono personalizado


class MembershipType(TimestampMixin, Base):
    """Plan de membresía que se puede comprar para una empresa."""
    __tablename__ = "membership_types"

    id = Column(Integer, primary_key=True, index=True)
    nombre_plan = Column(String(150), nullable=False)
    descripcion_plan = Column(Text, nullable=True)
    # [{"periodicidad": "mensual", "costo": 499.0}, ...]
    opciones_precios = Column(JSONType, nullable=False, default=list)
    beneficios = Column(JSONType, nullable=False, default=list)
    visibilidad = Column(String(20), nullable=False, default=VISIBILITY_PUBLIC)

    companies = relationship("Company", back_populates="membership_type")


class Certificate(TimestampMixin, Base):
    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, index=True)
    nombre_certificado = Column(String(255), nullable=False)
    imagen_url = Column(Text, nullable=False)  # recortada a cuadrado en el cliente
    descripcion = Column(Text, nullable=True)
    # Fechas en texto libre, tal como las captura el usuario
    fecha_emision = Column(String(50), nullable=True)
    fecha_vencimiento = Column(String(50), nullable=True)
    entidad_emisora = Column(String(255), nullable=True)
    estado = Column(String(20), nullable=False, default="activo")
