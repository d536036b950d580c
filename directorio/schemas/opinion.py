# directorio/schemas/opinion.py
# type: ignore

from pydantic import Field, EmailStr, field_validator
from typing import Optional, List, Literal
from datetime import datetime

from directorio.schemas.common import CamelModel

OpinionState = Literal["pendiente", "aprobada", "rechazada"]


class OpinionCreate(CamelModel):
    """Reseña enviada por cualquier visitante. Siempre nace 'pendiente'."""
    company_id: int
    nombre: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    calificacion: int = Field(..., ge=1, le=5)
    comentario: str = Field(..., min_length=10)


class OpinionUpdate(CamelModel):
    """Edición de contenido; el estado solo cambia con aprobar/rechazar."""
    nombre: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    calificacion: Optional[int] = Field(None, ge=1, le=5)
    comentario: Optional[str] = Field(None, min_length=10)

    @field_validator("nombre", "email", "calificacion", "comentario")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("El campo no puede ser nulo.")
        return value


class OpinionInDB(CamelModel):
    id: int
    company_id: int
    user_id: Optional[int] = None
    nombre: str
    email: str
    calificacion: int
    comentario: str
    estado: OpinionState
    fecha_aprobacion: Optional[datetime] = None
    aprobado_por: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class PublicOpinion(CamelModel):
    """Vista pública: sin email del autor."""
    id: int
    nombre: str
    calificacion: int
    comentario: str
    created_at: datetime


class OpinionList(CamelModel):
    opinions: List[OpinionInDB]
    total: int
    page: int
    total_pages: int


class CompanyOpinions(CamelModel):
    opinions: List[PublicOpinion]
    total: int
    promedio: Optional[float] = None
