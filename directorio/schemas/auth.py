# directorio/schemas/auth.py
#type: ignore

from pydantic import BaseModel, Field, EmailStr, field_validator
from typing import Optional, List, Literal
from datetime import datetime

from directorio.schemas.common import CamelModel

UserRole = Literal["admin", "user", "representante"]

# ***************************************************************
# 1. Schemas de Autenticación (JWT)
# ***************************************************************
class Token(BaseModel):
    """Modelo para la respuesta de un token de acceso."""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    role: str
    user_id: int

class TokenPayload(BaseModel):
    """Modelo para la carga útil (payload) del JWT."""
    sub: Optional[str] = None
    exp: Optional[int] = None
    type: Optional[str] = None

class UserLogin(BaseModel):
    """Schema para la solicitud de login."""
    email: EmailStr
    password: str

class UserRegister(CamelModel):
    """Alta pública con email/contraseña. Nunca puede crear administradores."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    display_name: Optional[str] = Field(None, max_length=255)
    role: Literal["user", "representante"] = "user"

class FederatedSignIn(CamelModel):
    """Identidad verificada por el proveedor externo (p. ej. inicio con Google)."""
    provider_uid: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    display_name: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = None

# ***************************************************************
# 2. Schemas de Usuario (Request/Response)
# ***************************************************************
class UserBase(CamelModel):
    """Base para la creación y lectura de usuarios."""
    email: EmailStr
    display_name: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = None
    role: UserRole = "user"


class UserCreate(UserBase):
    """Schema para la creación de un usuario por un administrador."""
    provider_uid: Optional[str] = Field(None, max_length=128)
    password: Optional[str] = Field(None, min_length=6)

class UserUpdate(CamelModel):
    """Schema para la actualización de un usuario (campos opcionales)."""
    email: Optional[EmailStr] = None
    display_name: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("email", "role", "is_active")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("El campo no puede ser nulo.")
        return value

class UserInDB(UserBase):
    """Schema para la representación del usuario desde la DB (sin hash)."""
    id: int
    provider_uid: str
    stripe_customer_id: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

# ***************************************************************
# 3. Catálogo de Roles (conjuntos de permisos)
# ***************************************************************
class RoleBase(CamelModel):
    """Esquema base para representar un Rol (Role)."""
    nombre: str = Field(..., min_length=1, max_length=100)
    descripcion: Optional[str] = None
    permisos: List[str] = Field(default_factory=list)
    estado: Literal["activo", "inactivo"] = "activo"

class RoleCreate(RoleBase):
    pass

class RoleUpdate(CamelModel):
    nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    descripcion: Optional[str] = None
    permisos: Optional[List[str]] = None
    estado: Optional[Literal["activo", "inactivo"]] = None

    @field_validator("nombre", "permisos", "estado")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("El campo no puede ser nulo.")
        return value

class RoleInDB(RoleBase):
    """Esquema extendido para devolver el Rol con su ID."""
    id: int
    created_at: datetime
    updated_at: datetime
