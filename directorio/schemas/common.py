# directorio/schemas/common.py
# type: ignore

from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base de todos los esquemas de la API.
    Los atributos son snake_case en Python y camelCase en el JSON
    (nombreEmpresa, membershipTypeId, ...). Se aceptan ambos en la entrada.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def blank_to_none(value):
    """Los formularios envían "" para campos opcionales vacíos."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class UploadResponse(CamelModel):
    image_url: str
    filename: str


class MessageResponse(BaseModel):
    message: str
    detail: Optional[str] = None
