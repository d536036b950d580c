# directorio/core/security.py
# type: ignore
from datetime import datetime, timedelta, timezone
from typing import Any, Union
from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError

from directorio.core.config import (
    SECRET_KEY,
    ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    REFRESH_TOKEN_EXPIRE_DAYS,
)
from directorio.schemas.auth import TokenPayload

# ***************************************************************
# 1. Configuración de Seguridad
# ***************************************************************

# Contexto para hashing de contraseñas (usa pbkdf2_sha256 por defecto)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Esquema de autenticación para FastAPI (para endpoints protegidos)
reusable_oauth2 = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

# Variante que no falla si no hay token (endpoints públicos con vista enriquecida)
optional_oauth2 = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

# ***************************************************************
# 2. Funciones de Hashing de Contraseñas
# ***************************************************************

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica si una contraseña en texto plano coincide con el hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Genera el hash de una contraseña en texto plano."""
    return pwd_context.hash(password)

# ***************************************************************
# 3. Funciones de Creación y Verificación de JWT
# ***************************************************************

def _encode(subject: Union[str, Any], token_type: str, expires_delta: timedelta) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject), "type": token_type}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def create_access_token(subject: Union[str, Any], expires_delta: timedelta = None) -> str:
    """Crea un nuevo token de acceso JWT."""
    return _encode(
        subject,
        ACCESS_TOKEN_TYPE,
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )

def create_refresh_token(subject: Union[str, Any], expires_delta: timedelta = None) -> str:
    """Crea un nuevo token de refresco JWT."""
    return _encode(
        subject,
        REFRESH_TOKEN_TYPE,
        expires_delta or timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> TokenPayload:
    """Decodifica y valida un token JWT. Lanza HTTPException si falla."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError, TypeError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas o token expirado.",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    # Un refresh token no sirve como token de acceso (y viceversa)
    if token_data.type != expected_type:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Tipo de token inválido.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token_data
