# directorio/schemas/catalog.py
# type: ignore

from pydantic import Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime

from directorio.schemas.common import CamelModel

# -------------------------------------------------------------------
# Categorías
# -------------------------------------------------------------------

class CategoryBase(CamelModel):
    nombre_categoria: str = Field(..., min_length=1, max_length=150)
    descripcion: Optional[str] = None
    icono: Optional[str] = Field("Tag", max_length=100)
    icono_url: Optional[str] = None

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(CategoryBase):
    nombre_categoria: Optional[str] = Field(None, min_length=1, max_length=150)
    icono: Optional[str] = Field(None, max_length=100)

    @field_validator("nombre_categoria")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("El nombre de la categoría es requerido.")
        return value

class CategoryInDB(CategoryBase):
    id: int
    created_at: datetime
    updated_at: datetime

# -------------------------------------------------------------------
# Tipos de membresía (planes)
# -------------------------------------------------------------------

class PriceOption(CamelModel):
    periodicidad: str = Field(..., min_length=1, max_length=50)  # mensual, anual...
    costo: float = Field(..., ge=0)

class MembershipTypeBase(CamelModel):
    nombre_plan: str = Field(..., min_length=1, max_length=150)
    descripcion_plan: Optional[str] = None
    opciones_precios: List[PriceOption] = Field(default_factory=list)
    beneficios: List[str] = Field(default_factory=list)
    visibilidad: Literal["publica", "privada"] = "publica"

class MembershipTypeCreate(MembershipTypeBase):
    pass

class MembershipTypeUpdate(CamelModel):
    nombre_plan: Optional[str] = Field(None, min_length=1, max_length=150)
    descripcion_plan: Optional[str] = None
    opciones_precios: Optional[List[PriceOption]] = None
    beneficios: Optional[List[str]] = None
    visibilidad: Optional[Literal["publica", "privada"]] = None

    @field_validator("nombre_plan", "opciones_precios", "beneficios", "visibilidad")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("El campo no puede ser nulo.")
        return value

class MembershipTypeInDB(MembershipTypeBase):
    id: int
    created_at: datetime
    updated_at: datetime

# -------------------------------------------------------------------
# Certificados
# -------------------------------------------------------------------

class CertificateBase(CamelModel):
    nombre_certificado: str = Field(..., min_length=1, max_length=255)
    imagen_url: str = Field(..., min_length=1)
    descripcion: Optional[str] = None
    fecha_emision: Optional[str] = Field(None, max_length=50)
    fecha_vencimiento: Optional[str] = Field(None, max_length=50)
    entidad_emisora: Optional[str] = Field(None, max_length=255)
    estado: Literal["activo", "inactivo"] = "activo"

class CertificateCreate(CertificateBase):
    pass

class CertificateUpdate(CamelModel):
    nombre_certificado: Optional[str] = Field(None, min_length=1, max_length=255)
    imagen_url: Optional[str] = Field(None, min_length=1)
    descripcion: Optional[str] = None
    fecha_emision: Optional[str] = Field(None, max_length=50)
    fecha_vencimiento: Optional[str] = Field(None, max_length=50)
    entidad_emisora: Optional[str] = Field(None, max_length=255)
    estado: Optional[Literal["activo", "inactivo"]] = None

    @field_validator("nombre_certificado", "imagen_url", "estado")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("El campo no puede ser nulo.")
        return value

class CertificateInDB(CertificateBase):
    id: int
    created_at: datetime
    updated_at: datetime
