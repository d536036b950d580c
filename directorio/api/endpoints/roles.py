# directorio/api/endpoints/roles.py
# type: ignore

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from directorio.database import get_db
from directorio.schemas.auth import RoleCreate, RoleUpdate, RoleInDB
from directorio.models.auth import Role, User
from directorio.api.endpoints.auth import get_admin_user

router = APIRouter()


def get_role_or_404(role_id: int, db: Session) -> Role:
    role = db.query(Role).filter(Role.id == role_id).first()
    if not role:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rol no encontrado.")
    return role


# ***************************************************************
# Catálogo de Roles (solo admin)
# ***************************************************************

@router.get("", response_model=List[RoleInDB])
def get_all_roles(_: User = Depends(get_admin_user), db: Session = Depends(get_db)):
    """Lista todos los roles del catálogo."""
    return db.query(Role).order_by(Role.nombre).all()


@router.get("/{role_id}", response_model=RoleInDB)
def read_role(role_id: int, _: User = Depends(get_admin_user), db: Session = Depends(get_db)):
    return get_role_or_404(role_id, db)


@router.post("", response_model=RoleInDB, status_code=status.HTTP_201_CREATED)
def create_role(role_in: RoleCreate, _: User = Depends(get_admin_user), db: Session = Depends(get_db)):
    if db.query(Role).filter(Role.nombre == role_in.nombre).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Ya existe un rol con ese nombre.")

    db_role = Role(**role_in.model_dump())
    db.add(db_role)
    db.commit()
    db.refresh(db_role)
    return db_role


@router.put("/{role_id}", response_model=RoleInDB)
def update_role(
    role_id: int,
    role_in: RoleUpdate,
    _: User = Depends(get_admin_user),
    db: Session = Depends(get_db),
):
    role = get_role_or_404(role_id, db)
    update_data = role_in.model_dump(exclude_unset=True)

    if "nombre" in update_data and update_data["nombre"] != role.nombre:
        if db.query(Role).filter(Role.nombre == update_data["nombre"]).first():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Ya existe un rol con ese nombre.")

    for key, value in update_data.items():
        setattr(role, key, value)

    db.add(role)
    db.commit()
    db.refresh(role)
    return role


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: int, _: User = Depends(get_admin_user), db: Session = Depends(get_db)):
    role = get_role_or_404(role_id, db)
    db.delete(role)
    db.commit()
