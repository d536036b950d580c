# directorio/api/endpoints/membership_types.py
# type: ignore

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from directorio.database import get_db
from directorio.models.auth import User, ROLE_ADMIN
from directorio.models.catalog import MembershipType, VISIBILITY_PUBLIC
from directorio.models.platform import Company
from directorio.schemas.catalog import MembershipTypeCreate, MembershipTypeUpdate, MembershipTypeInDB
from directorio.api.endpoints.auth import get_admin_user, get_optional_user

router = APIRouter()


def get_membership_type_or_404(membership_type_id: int, db: Session) -> MembershipType:
    membership_type = db.query(MembershipType).filter(MembershipType.id == membership_type_id).first()
    if not membership_type:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tipo de membresía no encontrado.")
    return membership_type


@router.get("", response_model=List[MembershipTypeInDB])
def read_membership_types(db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    """Todos los planes, públicos y privados. Requiere admin."""
    return db.query(MembershipType).order_by(MembershipType.nombre_plan).all()


@router.get("/public", response_model=List[MembershipTypeInDB])
def read_public_membership_types(db: Session = Depends(get_db)):
    """Planes visibles para cualquier visitante."""
    return (
        db.query(MembershipType)
        .filter(MembershipType.visibilidad == VISIBILITY_PUBLIC)
        .order_by(MembershipType.nombre_plan)
        .all()
    )


@router.get("/{membership_type_id}", response_model=MembershipTypeInDB)
def read_membership_type(
    membership_type_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    membership_type = get_membership_type_or_404(membership_type_id, db)
    # Un plan privado no existe para quien no es admin
    if membership_type.visibilidad != VISIBILITY_PUBLIC and (user is None or user.role != ROLE_ADMIN):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tipo de membresía no encontrado.")
    return membership_type


@router.post("", response_model=MembershipTypeInDB, status_code=status.HTTP_201_CREATED)
def create_membership_type(
    membership_type_in: MembershipTypeCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    db_membership_type = MembershipType(**membership_type_in.model_dump())
    db.add(db_membership_type)
    db.commit()
    db.refresh(db_membership_type)
    return db_membership_type


@router.put("/{membership_type_id}", response_model=MembershipTypeInDB)
def update_membership_type(
    membership_type_id: int,
    membership_type_in: MembershipTypeUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    membership_type = get_membership_type_or_404(membership_type_id, db)

    for key, value in membership_type_in.model_dump(exclude_unset=True).items():
        setattr(membership_type, key, value)

    db.add(membership_type)
    db.commit()
    db.refresh(membership_type)
    return membership_type


@router.delete("/{membership_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_membership_type(
    membership_type_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    membership_type = get_membership_type_or_404(membership_type_id, db)

    in_use = db.query(Company).filter(Company.membership_type_id == membership_type.id).count()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"El plan está asignado a {in_use} empresa(s); reasígnalas antes de eliminarlo.",
        )

    db.delete(membership_type)
    db.commit()
