# directorio/api/endpoints/opinions.py
# type: ignore

import logging
import math
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from directorio.database import get_db, utcnow
from directorio.models.auth import User, ROLE_REPRESENTATIVE
from directorio.models.opinion import (
    Opinion,
    OPINION_PENDING,
    OPINION_APPROVED,
    OPINION_REJECTED,
    OPINION_STATES,
)
from directorio.models.platform import Company, COMPANY_ACTIVE
from directorio.schemas.opinion import OpinionCreate, OpinionUpdate, OpinionInDB, OpinionList
from directorio.api.endpoints.auth import (
    get_admin_user,
    get_staff_user,
    check_company_ownership,
    check_maintenance,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ***************************************************************
# DEPENDENCIAS DE ACCESO
# ***************************************************************

def get_opinion_and_check_access(opinion_id: int, db: Session, user: User) -> Opinion:
    """Busca la opinión y verifica que el usuario sea admin o dueño de la empresa."""
    opinion = db.query(Opinion).filter(Opinion.id == opinion_id).first()
    if not opinion:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opinión no encontrada.")
    check_company_ownership(opinion.company, user)
    return opinion


def moderate(opinion: Opinion, new_state: str, moderator: User) -> None:
    """
    Cambia el estado y registra quién y cuándo. Sin candado de estado
    terminal: con moderaciones concurrentes gana la última escritura.
    """
    opinion.estado = new_state
    opinion.fecha_aprobacion = utcnow()
    opinion.aprobado_por = moderator.id


# ***************************************************************
# 1. Enviar una opinión (cualquier visitante)
# ***************************************************************
@router.post("", response_model=OpinionInDB, status_code=status.HTTP_201_CREATED)
def create_opinion(
    opinion_in: OpinionCreate,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(check_maintenance),
):
    """Registra una reseña en estado 'pendiente'."""
    company = db.query(Company).filter(Company.id == opinion_in.company_id).first()
    if not company or company.estado != COMPANY_ACTIVE:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empresa no encontrada.")

    db_opinion = Opinion(
        **opinion_in.model_dump(),
        user_id=user.id if user is not None else None,
        estado=OPINION_PENDING,
    )
    db.add(db_opinion)
    db.commit()
    db.refresh(db_opinion)
    logger.info("Opinión %s recibida para la empresa %s", db_opinion.id, company.id)
    return db_opinion


# ***************************************************************
# 2. Listado para moderación
# ***************************************************************
@router.get("", response_model=OpinionList)
def read_opinions(
    db: Session = Depends(get_db),
    user: User = Depends(get_staff_user),
    estado: Optional[str] = Query(None),
    company_id: Optional[int] = Query(None, alias="companyId"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
):
    """
    Admin ve todas; un representante solo las de sus empresas.
    """
    if estado is not None and estado not in OPINION_STATES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Estado inválido: {estado}.")

    query = db.query(Opinion)
    if user.role == ROLE_REPRESENTATIVE:
        query = query.join(Company, Opinion.company_id == Company.id).filter(Company.user_id == user.id)

    if estado:
        query = query.filter(Opinion.estado == estado)
    if company_id is not None:
        query = query.filter(Opinion.company_id == company_id)

    total = query.count()
    opinions = (
        query.order_by(Opinion.created_at.desc(), Opinion.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "opinions": opinions,
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


@router.get("/{opinion_id}", response_model=OpinionInDB)
def read_opinion(opinion_id: int, db: Session = Depends(get_db), user: User = Depends(get_staff_user)):
    return get_opinion_and_check_access(opinion_id, db, user)


# ***************************************************************
# 3. Edición de contenido (solo admin)
# ***************************************************************
@router.put("/{opinion_id}", response_model=OpinionInDB)
def update_opinion(
    opinion_id: int,
    opinion_in: OpinionUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    opinion = get_opinion_and_check_access(opinion_id, db, admin)

    for key, value in opinion_in.model_dump(exclude_unset=True).items():
        setattr(opinion, key, value)

    db.add(opinion)
    db.commit()
    db.refresh(opinion)
    return opinion


# ***************************************************************
# 4. Moderación: aprobar / rechazar
# ***************************************************************
@router.post("/{opinion_id}/approve", response_model=OpinionInDB)
def approve_opinion(opinion_id: int, db: Session = Depends(get_db), user: User = Depends(get_staff_user)):
    """Aprueba la opinión. Admin o representante dueño de la empresa."""
    opinion = get_opinion_and_check_access(opinion_id, db, user)
    moderate(opinion, OPINION_APPROVED, user)
    db.add(opinion)
    db.commit()
    db.refresh(opinion)
    logger.info("Opinión %s aprobada por el usuario %s", opinion.id, user.id)
    return opinion


@router.post("/{opinion_id}/reject", response_model=OpinionInDB)
def reject_opinion(opinion_id: int, db: Session = Depends(get_db), user: User = Depends(get_staff_user)):
    """Rechaza la opinión. Admin o representante dueño de la empresa."""
    opinion = get_opinion_and_check_access(opinion_id, db, user)
    moderate(opinion, OPINION_REJECTED, user)
    db.add(opinion)
    db.commit()
    db.refresh(opinion)
    logger.info("Opinión %s rechazada por el usuario %s", opinion.id, user.id)
    return opinion


# ***************************************************************
# 5. Eliminación (desde cualquier estado)
# ***************************************************************
@router.delete("/{opinion_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_opinion(opinion_id: int, db: Session = Depends(get_db), user: User = Depends(get_staff_user)):
    opinion = get_opinion_and_check_access(opinion_id, db, user)
    db.delete(opinion)
    db.commit()
