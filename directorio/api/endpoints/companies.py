# directorio/api/endpoints/companies.py
# type: ignore
import logging
import math
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import or_, func
from sqlalchemy.orm import Session
from typing import List, Optional

from directorio.database import get_db
from directorio.models.auth import User, ROLE_ADMIN, ROLE_REPRESENTATIVE
from directorio.models.opinion import Opinion, OPINION_APPROVED
from directorio.models.payment import MembershipPayment
from directorio.models.platform import Company, COMPANY_ACTIVE, COMPANY_PENDING
from directorio.schemas.opinion import CompanyOpinions, PublicOpinion
from directorio.schemas.platform import CompanyCreate, CompanyUpdate, CompanyDetail, CompanyList
from directorio.services.companies import build_company_detail, validate_company_references
from directorio.api.endpoints.auth import (
    get_current_user,
    get_optional_user,
    get_staff_user,
    check_company_ownership,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Campos que solo un admin puede fijar (la membresía cambia vía pagos)
ADMIN_ONLY_FIELDS = {
    "user_id",
    "estado",
    "membership_type_id",
    "forma_pago",
    "fecha_inicio_membresia",
    "fecha_fin_membresia",
    "notas_membresia",
}

# ***************************************************************
# Dependencias de acceso
# ***************************************************************

def get_company_or_404(company_id: int, db: Session) -> Company:
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empresa no encontrada.")
    return company


def get_visible_company(company_id: int, db: Session, user: Optional[User]) -> Company:
    """
    Aplica las reglas de visibilidad de una ficha:
    - admin: todas.
    - representante: solo las suyas (403 en otra).
    - visitante o 'user': solo las activas (404 en otra).
    """
    company = get_company_or_404(company_id, db)
    if user is not None and user.role in (ROLE_ADMIN, ROLE_REPRESENTATIVE):
        check_company_ownership(company, user)
        return company
    if company.estado != COMPANY_ACTIVE:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empresa no encontrada.")
    return company


def reject_admin_only_fields(fields: set, user: User) -> None:
    if user.role == ROLE_ADMIN:
        return
    restricted = sorted(fields & ADMIN_ONLY_FIELDS)
    if restricted:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Solo un admin puede modificar: {', '.join(restricted)}.",
        )


# ***************************************************************
# 1. Listado (directorio público / back-office)
# ***************************************************************

@router.get("", response_model=CompanyList)
def read_companies(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
    search: Optional[str] = Query(None, description="Buscar por nombre, email o descripción."),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    membership_type_id: Optional[int] = Query(None, alias="membershipTypeId"),
    estado: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    Lista empresas con filtros y paginación.
    - Admin: todas.
    - Representante: solo las suyas.
    - Visitante / 'user': solo las activas.
    """
    query = db.query(Company)

    if user is not None and user.role == ROLE_ADMIN:
        pass
    elif user is not None and user.role == ROLE_REPRESENTATIVE:
        query = query.filter(Company.user_id == user.id)
    else:
        query = query.filter(Company.estado == COMPANY_ACTIVE)

    if estado:
        query = query.filter(Company.estado == estado)

    if membership_type_id is not None:
        query = query.filter(Company.membership_type_id == membership_type_id)

    if search:
        search_pattern = f"%{search}%"
        query = query.filter(
            or_(
                Company.nombre_empresa.ilike(search_pattern),
                Company.email1.ilike(search_pattern),
                Company.descripcion_empresa.ilike(search_pattern),
            )
        )

    query = query.order_by(Company.created_at.desc(), Company.id.desc())
    offset = (page - 1) * limit

    if category_id is not None:
        # Las categorías viven en una lista JSON: se filtra en memoria
        matching = [c for c in query.all() if category_id in (c.categories_ids or [])]
        total = len(matching)
        companies = matching[offset:offset + limit]
    else:
        total = query.count()
        companies = query.offset(offset).limit(limit).all()

    return {
        "companies": [build_company_detail(db, c) for c in companies],
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


@router.get("/mine", response_model=List[CompanyDetail])
def read_my_companies(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Empresas cuyo dueño es el usuario autenticado."""
    companies = (
        db.query(Company)
        .filter(Company.user_id == user.id)
        .order_by(Company.created_at.desc())
        .all()
    )
    return [build_company_detail(db, c) for c in companies]


@router.get("/{company_id}", response_model=CompanyDetail)
def read_company(
    company_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    company = get_visible_company(company_id, db, user)
    return build_company_detail(db, company)


@router.get("/{company_id}/opinions", response_model=CompanyOpinions)
def read_company_opinions(
    company_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Opiniones aprobadas de la empresa y su calificación promedio."""
    company = get_visible_company(company_id, db, user)
    approved = (
        db.query(Opinion)
        .filter(Opinion.company_id == company.id, Opinion.estado == OPINION_APPROVED)
        .order_by(Opinion.created_at.desc())
        .all()
    )
    average = (
        db.query(func.avg(Opinion.calificacion))
        .filter(Opinion.company_id == company.id, Opinion.estado == OPINION_APPROVED)
        .scalar()
    )
    return {
        "opinions": [PublicOpinion.model_validate(o) for o in approved],
        "total": len(approved),
        "promedio": round(float(average), 2) if average is not None else None,
    }


# ***************************************************************
# 2. Alta / edición / baja
# ***************************************************************

@router.post("", response_model=CompanyDetail, status_code=status.HTTP_201_CREATED)
def create_company(
    company_in: CompanyCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_staff_user),
):
    """
    Crea una empresa. Un representante queda como dueño y su ficha
    nace 'pendiente' hasta que un admin la active.
    """
    reject_admin_only_fields(company_in.model_fields_set, user)

    data = company_in.model_dump()
    validate_company_references(db, data)

    if user.role == ROLE_REPRESENTATIVE:
        data["user_id"] = user.id
        data["estado"] = COMPANY_PENDING
    elif data.get("user_id") is not None and not db.query(User).filter(User.id == data["user_id"]).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario dueño no encontrado.")

    db_company = Company(**data)
    db.add(db_company)
    db.commit()
    db.refresh(db_company)
    logger.info("Empresa %s creada por el usuario %s", db_company.id, user.id)
    return build_company_detail(db, db_company)


@router.put("/{company_id}", response_model=CompanyDetail)
def update_company(
    company_id: int,
    company_in: CompanyUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Actualiza una empresa. Admin o el representante dueño."""
    company = get_company_or_404(company_id, db)
    check_company_ownership(company, user)

    update_data = company_in.model_dump(exclude_unset=True)
    # Reenviar el valor actual de un campo restringido no cuenta como cambio
    changed = {key for key, value in update_data.items() if getattr(company, key) != value}
    reject_admin_only_fields(changed, user)
    validate_company_references(db, update_data)

    if update_data.get("user_id") is not None and not db.query(User).filter(User.id == update_data["user_id"]).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario dueño no encontrado.")

    for key, value in update_data.items():
        setattr(company, key, value)

    db.add(company)
    db.commit()
    db.refresh(company)
    return build_company_detail(db, company)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(
    company_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Elimina una empresa y sus opiniones.
    Los pagos se conservan para auditoría, sin empresa asociada.
    """
    company = get_company_or_404(company_id, db)
    check_company_ownership(company, user)

    try:
        db.query(MembershipPayment).filter(MembershipPayment.company_id == company.id).update(
            {MembershipPayment.company_id: None}
        )
        db.delete(company)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Error al eliminar la empresa %s", company_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al eliminar la empresa. Detalle: {str(e)}",
        )
    logger.info("Empresa %s eliminada por el usuario %s", company_id, user.id)
