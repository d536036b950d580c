# directorio/schemas/settings.py
# type: ignore

from pydantic import Field, EmailStr, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from directorio.schemas.common import CamelModel, blank_to_none


class SystemSettingsInDB(CamelModel):
    nombre_sistema: str
    descripcion_sistema: Optional[str] = None
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    color_primario: str
    color_secundario: str
    color_acento: str
    idioma: str
    moneda: str
    zona_horaria: str
    email_contacto: Optional[str] = None
    telefono_contacto: Optional[str] = None
    url_sistema: Optional[str] = None
    redes_sociales: Dict[str, Any] = Field(default_factory=dict)
    configuracion_seo: Dict[str, Any] = Field(default_factory=dict)
    configuracion_email: Dict[str, Any] = Field(default_factory=dict)
    configuracion_pago: Dict[str, Any] = Field(default_factory=dict)
    modo_mantenimiento: bool
    registro_habilitado: bool
    tamano_maximo_archivo_mb: int
    tipos_archivo_permitidos: List[str] = Field(default_factory=list)
    updated_at: datetime


class SystemSettingsUpdate(CamelModel):
    """Actualización parcial del registro de configuración."""
    nombre_sistema: Optional[str] = Field(None, min_length=1, max_length=255)
    descripcion_sistema: Optional[str] = None
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    color_primario: Optional[str] = Field(None, min_length=1, max_length=20)
    color_secundario: Optional[str] = Field(None, min_length=1, max_length=20)
    color_acento: Optional[str] = Field(None, min_length=1, max_length=20)
    idioma: Optional[str] = Field(None, min_length=2, max_length=10)
    moneda: Optional[str] = Field(None, min_length=1, max_length=10)
    zona_horaria: Optional[str] = Field(None, max_length=64)
    email_contacto: Optional[EmailStr] = None
    telefono_contacto: Optional[str] = None
    url_sistema: Optional[str] = None
    redes_sociales: Optional[Dict[str, Any]] = None
    configuracion_seo: Optional[Dict[str, Any]] = None
    configuracion_email: Optional[Dict[str, Any]] = None
    configuracion_pago: Optional[Dict[str, Any]] = None
    modo_mantenimiento: Optional[bool] = None
    registro_habilitado: Optional[bool] = None
    tamano_maximo_archivo_mb: Optional[int] = Field(None, ge=1, le=100)
    tipos_archivo_permitidos: Optional[List[str]] = None

    @field_validator("email_contacto", mode="before")
    @classmethod
    def empty_as_none(cls, value):
        return blank_to_none(value)

    @field_validator(
        "nombre_sistema", "color_primario", "color_secundario", "color_acento",
        "idioma", "moneda", "zona_horaria", "redes_sociales", "configuracion_seo",
        "configuracion_email", "configuracion_pago", "modo_mantenimiento",
        "registro_habilitado", "tamano_maximo_archivo_mb", "tipos_archivo_permitidos",
    )
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("El campo no puede ser nulo.")
        return value
