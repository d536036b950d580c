# directorio/schemas/platform.py
# type: ignore
from pydantic import Field, EmailStr, field_validator
from typing import Optional, List, Dict, Literal
from datetime import datetime, date

from directorio.schemas.common import CamelModel, blank_to_none
from directorio.schemas.catalog import CategoryInDB, CertificateInDB, MembershipTypeInDB

CompanyState = Literal["activo", "inactivo", "pendiente"]


class GeoLocation(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


# ***************************************************************
# 1. Schemas para COMPANY
# ***************************************************************
class CompanyBase(CamelModel):
    """Base para la creación y lectura de Empresas."""
    nombre_empresa: str = Field(..., min_length=1, max_length=255)
    logotipo_url: Optional[str] = None

    telefono1: Optional[str] = Field(None, max_length=50)
    telefono2: Optional[str] = Field(None, max_length=50)
    email1: EmailStr
    email2: Optional[EmailStr] = None
    sitio_web: Optional[str] = None

    paises_presencia: List[str] = Field(default_factory=list)
    estados_presencia: List[str] = Field(default_factory=list)
    ciudades_presencia: List[str] = Field(default_factory=list)
    direccion_fisica: Optional[str] = None
    ubicacion_geografica: Optional[GeoLocation] = None

    representantes_ventas: List[str] = Field(default_factory=list)
    descripcion_empresa: Optional[str] = None
    galeria_productos_urls: List[str] = Field(default_factory=list)
    categories_ids: List[int] = Field(default_factory=list)
    certificates_ids: List[int] = Field(default_factory=list)
    redes_sociales: Dict[str, str] = Field(default_factory=dict)
    catalogo_digital_url: Optional[str] = None
    videos_urls: List[str] = Field(default_factory=list)

    membership_type_id: Optional[int] = None
    forma_pago: Optional[str] = Field(None, max_length=50)
    fecha_inicio_membresia: Optional[date] = None
    fecha_fin_membresia: Optional[date] = None
    notas_membresia: Optional[str] = None

    user_id: Optional[int] = None
    estado: CompanyState = "activo"

    @field_validator("email2", "sitio_web", "telefono2", mode="before")
    @classmethod
    def empty_as_none(cls, value):
        return blank_to_none(value)


class CompanyCreate(CompanyBase):
    """Schema de entrada para crear una Empresa."""
    pass


class CompanyUpdate(CompanyBase):
    """Schema de entrada para actualizar una Empresa (todos opcionales)."""
    nombre_empresa: Optional[str] = Field(None, min_length=1, max_length=255)
    email1: Optional[EmailStr] = None
    paises_presencia: Optional[List[str]] = None
    estados_presencia: Optional[List[str]] = None
    ciudades_presencia: Optional[List[str]] = None
    representantes_ventas: Optional[List[str]] = None
    galeria_productos_urls: Optional[List[str]] = None
    categories_ids: Optional[List[int]] = None
    certificates_ids: Optional[List[int]] = None
    redes_sociales: Optional[Dict[str, str]] = None
    videos_urls: Optional[List[str]] = None
    estado: Optional[CompanyState] = None

    @field_validator(
        "nombre_empresa", "email1", "estado", "paises_presencia", "estados_presencia",
        "ciudades_presencia", "representantes_ventas", "galeria_productos_urls",
        "categories_ids", "certificates_ids", "redes_sociales", "videos_urls",
    )
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("El campo no puede ser nulo.")
        return value


class CompanyInDB(CompanyBase):
    """Schema de salida para una Empresa (incluye ID y metadata de la DB)."""
    id: int
    created_at: datetime
    updated_at: datetime


class CompanyDetail(CompanyInDB):
    """Empresa con sus relaciones expandidas."""
    categories: List[CategoryInDB] = Field(default_factory=list)
    certificates: List[CertificateInDB] = Field(default_factory=list)
    membership_type: Optional[MembershipTypeInDB] = None


class CompanyList(CamelModel):
    companies: List[CompanyDetail]
    total: int
    page: int
    total_pages: int


# ***************************************************************
# 2. Estadísticas del panel
# ***************************************************************
class DirectoryStatistics(CamelModel):
    total_companies: int
    active_companies: int
    total_users: int
    new_registrations: int
    pending_opinions: int
    total_revenue: float
