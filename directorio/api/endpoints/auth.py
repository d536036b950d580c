# directorio/api/endpoints/auth.py
# type: ignore

import logging
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from directorio.database import get_db
from directorio.core.config import IDENTITY_SHARED_SECRET
from directorio.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    reusable_oauth2,
    optional_oauth2,
    decode_token,
    REFRESH_TOKEN_TYPE,
)
from directorio.models.auth import User, ROLE_ADMIN, ROLE_REPRESENTATIVE
from directorio.models.platform import Company
from directorio.schemas.auth import Token, UserLogin, UserRegister, FederatedSignIn, UserInDB
from directorio.services.settings import get_or_create_settings

logger = logging.getLogger(__name__)

router = APIRouter()

# ***************************************************************
# 1. Dependencias de autenticación (RBAC)
# ***************************************************************
def _user_from_token(db: Session, token: str, expected_type: str) -> User:
    token_data = decode_token(token, expected_type)
    if token_data.sub is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token no contiene ID de usuario.")

    try:
        user_id = int(token_data.sub)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token no contiene ID de usuario.")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Usuario no encontrado o inactivo.")
    return user


def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(reusable_oauth2)
) -> User:
    """Decodifica el token de acceso y busca al usuario en la DB."""
    return _user_from_token(db, token, "access")


def get_optional_user(
    db: Session = Depends(get_db), token: Optional[str] = Depends(optional_oauth2)
) -> Optional[User]:
    """Como get_current_user, pero permite visitantes anónimos (devuelve None)."""
    if not token:
        return None
    return _user_from_token(db, token, "access")


def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Verifica si el usuario actual tiene el rol de admin."""
    if current_user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acceso denegado. Se requiere rol 'admin'.",
        )
    return current_user


def get_staff_user(current_user: User = Depends(get_current_user)) -> User:
    """Requiere rol admin o representante."""
    if current_user.role not in (ROLE_ADMIN, ROLE_REPRESENTATIVE):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acceso denegado. Se requiere rol 'admin' o 'representante'.",
        )
    return current_user


def check_company_ownership(company: Company, user: Optional[User]) -> None:
    """Admin siempre; un representante solo sobre empresas cuyo userId es el suyo."""
    if user is not None and user.role == ROLE_ADMIN:
        return
    if user is not None and user.role == ROLE_REPRESENTATIVE and company.user_id == user.id:
        return
    logger.warning(
        "Acceso denegado a la empresa %s para el usuario %s",
        company.id, user.id if user is not None else "anónimo",
    )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Acceso denegado. La empresa no pertenece a tu cuenta.",
    )


def check_maintenance(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
) -> Optional[User]:
    """Bloquea las mutaciones públicas mientras el sistema está en mantenimiento."""
    settings = get_or_create_settings(db)
    if settings.modo_mantenimiento and (user is None or user.role != ROLE_ADMIN):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="El sistema está en mantenimiento. Intenta más tarde.",
        )
    return user


def _issue_tokens(user: User) -> dict:
    return {
        "access_token": create_access_token(subject=user.id),
        "refresh_token": create_refresh_token(subject=user.id),
        "token_type": "bearer",
        "role": user.role,
        "user_id": user.id,
    }

# ***************************************************************
# 2. Registro con email/contraseña
# ***************************************************************
@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(
    user_in: UserRegister,
    db: Session = Depends(get_db),
    _: Optional[User] = Depends(check_maintenance),
):
    """Crea una cuenta 'user' o 'representante' y devuelve sus tokens."""
    settings = get_or_create_settings(db)
    if not settings.registro_habilitado:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="El registro de usuarios está deshabilitado.")

    if db.query(User).filter(User.email == user_in.email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El email ya está registrado.")

    db_user = User(
        provider_uid=f"local:{uuid4()}",
        email=user_in.email,
        display_name=user_in.display_name,
        role=user_in.role,
        password_hash=get_password_hash(user_in.password),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Usuario %s registrado con rol '%s'", db_user.id, db_user.role)
    return _issue_tokens(db_user)

# ***************************************************************
# 3. Login con email/contraseña
# ***************************************************************
@router.post("/login", response_model=Token)
def login_for_access_token(user_in: UserLogin, db: Session = Depends(get_db)):
    """Autentica un usuario y devuelve un token JWT y un Refresh Token."""
    user = db.query(User).filter(User.email == user_in.email).first()

    if not user or not user.password_hash or not verify_password(user_in.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email o contraseña incorrectos.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="La cuenta de usuario está inactiva.",
        )

    return _issue_tokens(user)

# ***************************************************************
# 4. Inicio de sesión federado (proveedor de identidad externo)
# ***************************************************************
@router.post("/federated", response_model=Token)
def federated_sign_in(
    identity: FederatedSignIn,
    db: Session = Depends(get_db),
    x_identity_secret: Optional[str] = Header(None),
):
    """
    Refleja la identidad del proveedor en la tabla de usuarios (crea o
    actualiza por UID) y emite los tokens de la API.
    """
    if IDENTITY_SHARED_SECRET and x_identity_secret != IDENTITY_SHARED_SECRET:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Identidad no verificada.")

    user = db.query(User).filter(User.provider_uid == identity.provider_uid).first()
    if user is None:
        if db.query(User).filter(User.email == identity.email).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El email ya está registrado con otra cuenta.",
            )
        user = User(
            provider_uid=identity.provider_uid,
            email=identity.email,
            display_name=identity.display_name,
            photo_url=identity.photo_url,
        )
        logger.info("Nueva identidad federada %s", identity.provider_uid)
    else:
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="La cuenta de usuario está inactiva.")
        if identity.display_name:
            user.display_name = identity.display_name
        if identity.photo_url:
            user.photo_url = identity.photo_url

    db.add(user)
    db.commit()
    db.refresh(user)
    return _issue_tokens(user)

# ***************************************************************
# 5. Refresh (Token Rotation)
# ***************************************************************
@router.post("/refresh", response_model=Token)
def refresh_access_token(
    refresh_token: str = Depends(reusable_oauth2),
    db: Session = Depends(get_db),
):
    """
    Refresca el token de acceso JWT usando un Refresh Token.
    Devuelve un nuevo access_token y un nuevo refresh_token.
    """
    current_user = _user_from_token(db, refresh_token, REFRESH_TOKEN_TYPE)
    return _issue_tokens(current_user)


@router.get("/me", response_model=UserInDB)
def read_users_me(current_user: User = Depends(get_current_user)):
    """Obtiene la información del usuario autenticado."""
    return current_user
