# directorio/api/endpoints/users.py
# type: ignore

import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import uuid4

from directorio.database import get_db
from directorio.models.auth import User, ROLE_ADMIN
from directorio.models.opinion import Opinion
from directorio.models.payment import MembershipPayment
from directorio.models.platform import Company
from directorio.schemas.auth import UserCreate, UserInDB, UserUpdate
from directorio.schemas.payment import MembershipPaymentInDB
from directorio.core.security import get_password_hash
from directorio.api.endpoints.auth import get_current_user, get_admin_user

logger = logging.getLogger(__name__)

router = APIRouter()

# ***************************************************************
# DEPENDENCIAS DE PERMISOS Y ACCESO
# ***************************************************************

def check_self_or_admin(target: User, current_user: User) -> None:
    """Cada usuario accede a su propio perfil; a los demás solo un admin."""
    if target.id == current_user.id or current_user.role == ROLE_ADMIN:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Acceso denegado. No tienes permisos para acceder a otros usuarios.",
    )


def get_user_or_404(user_id: int, db: Session) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado.")
    return user


# ***************************************************************
# 1. Listar Usuarios (GET /api/users)
# ***************************************************************
@router.get("", response_model=List[UserInDB])
def read_users(
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
    role: Optional[str] = Query(None, description="Filtrar por rol"),
):
    """Lista los usuarios. Solo admin."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return query.order_by(User.id).all()


# ***************************************************************
# 2. Crear Usuario (POST /api/users)
# ***************************************************************
@router.post("", response_model=UserInDB, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Crea un usuario (cualquier rol). Solo admin."""
    if db.query(User).filter(User.email == user_in.email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El email ya está registrado.")

    provider_uid = user_in.provider_uid or f"local:{uuid4()}"
    if db.query(User).filter(User.provider_uid == provider_uid).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El UID del proveedor ya existe.")

    db_user = User(
        provider_uid=provider_uid,
        email=user_in.email,
        display_name=user_in.display_name,
        photo_url=user_in.photo_url,
        role=user_in.role,
        password_hash=get_password_hash(user_in.password) if user_in.password else None,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Usuario %s creado por el admin %s", db_user.id, admin.id)
    return db_user


# ***************************************************************
# 3. Buscar Usuario por UID del proveedor
# ***************************************************************
@router.get("/by-uid/{provider_uid}", response_model=UserInDB)
def read_user_by_uid(
    provider_uid: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = db.query(User).filter(User.provider_uid == provider_uid).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado.")
    check_self_or_admin(user, current_user)
    return user


# ***************************************************************
# 4. Buscar Usuario por ID (GET /api/users/{user_id})
# ***************************************************************
@router.get("/{user_id}", response_model=UserInDB)
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Obtiene un usuario por su ID (el propio o, para admin, cualquiera)."""
    user = get_user_or_404(user_id, db)
    check_self_or_admin(user, current_user)
    return user


# ***************************************************************
# 5. Actualizar Usuario (PUT /api/users/{user_id})
# ***************************************************************
@router.put("/{user_id}", response_model=UserInDB)
def update_user(
    user_id: int,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Actualiza campos de un usuario, con restricciones de rol."""
    db_user = get_user_or_404(user_id, db)
    check_self_or_admin(db_user, current_user)

    update_data = user_in.model_dump(exclude_unset=True)
    is_admin = current_user.role == ROLE_ADMIN

    # Solo un admin cambia roles o activa/desactiva cuentas
    if not is_admin and ("role" in update_data or "is_active" in update_data):
        if update_data.get("role", db_user.role) != db_user.role or \
                update_data.get("is_active", db_user.is_active) != db_user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Solo un admin puede cambiar el rol o el estado de una cuenta.",
            )

    if "email" in update_data and update_data["email"] != db_user.email:
        if db.query(User).filter(User.email == update_data["email"]).first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El email ya está registrado.")

    if "password" in update_data:
        password = update_data.pop("password")
        if password:
            db_user.password_hash = get_password_hash(password)

    for key, value in update_data.items():
        setattr(db_user, key, value)

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


# ***************************************************************
# 6. Eliminar Usuario (DELETE /api/users/{user_id})
# ***************************************************************
@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Elimina un usuario por ID. Solo admin."""
    db_user = get_user_or_404(user_id, db)

    if db_user.id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No puedes eliminar tu propia cuenta de administrador.",
        )

    # Las empresas, opiniones y pagos se conservan sin dueño
    db.query(Company).filter(Company.user_id == db_user.id).update({Company.user_id: None})
    db.query(Opinion).filter(Opinion.user_id == db_user.id).update({Opinion.user_id: None})
    db.query(MembershipPayment).filter(MembershipPayment.user_id == db_user.id).update(
        {MembershipPayment.user_id: None}
    )
    db.delete(db_user)
    db.commit()


# ***************************************************************
# 7. Historial de pagos de un usuario
# ***************************************************************
@router.get("/{user_id}/payments", response_model=List[MembershipPaymentInDB])
def read_user_payments(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = get_user_or_404(user_id, db)
    check_self_or_admin(user, current_user)
    return (
        db.query(MembershipPayment)
        .filter(MembershipPayment.user_id == user.id)
        .order_by(MembershipPayment.created_at.desc())
        .all()
    )
