# directorio/services/companies.py
# type: ignore
"""Utilidades compartidas sobre la ficha de empresa y sus listas de IDs."""

from typing import Iterable, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from directorio.models.catalog import Category, Certificate, MembershipType
from directorio.models.platform import Company
from directorio.schemas.catalog import CategoryInDB, CertificateInDB, MembershipTypeInDB
from directorio.schemas.platform import CompanyDetail, CompanyInDB


def ensure_ids_exist(db: Session, model, ids: Iterable[int], label: str) -> None:
    """404 si algún ID referenciado no existe."""
    wanted = set(ids or [])
    if not wanted:
        return
    found = {row.id for row in db.query(model.id).filter(model.id.in_(wanted)).all()}
    missing = sorted(wanted - found)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} no encontrado(s): {', '.join(str(i) for i in missing)}.",
        )


def validate_company_references(db: Session, data: dict) -> None:
    if data.get("categories_ids"):
        ensure_ids_exist(db, Category, data["categories_ids"], "Categoría(s)")
    if data.get("certificates_ids"):
        ensure_ids_exist(db, Certificate, data["certificates_ids"], "Certificado(s)")
    if data.get("membership_type_id") is not None:
        ensure_ids_exist(db, MembershipType, [data["membership_type_id"]], "Tipo de membresía")


def remove_id_from_companies(db: Session, attribute: str, ref_id: int) -> int:
    """
    Quita `ref_id` de la lista JSON `attribute` de todas las empresas.
    Devuelve cuántas empresas se modificaron. No hace commit.
    """
    touched = 0
    for company in db.query(Company).all():
        current: List[int] = getattr(company, attribute) or []
        if ref_id in current:
            # Reasignar la lista para que SQLAlchemy detecte el cambio en la columna JSON
            setattr(company, attribute, [i for i in current if i != ref_id])
            db.add(company)
            touched += 1
    return touched


def build_company_detail(db: Session, company: Company) -> CompanyDetail:
    """Empresa con categorías, certificados y plan expandidos."""
    categories = []
    if company.categories_ids:
        categories = (
            db.query(Category)
            .filter(Category.id.in_(company.categories_ids))
            .order_by(Category.nombre_categoria)
            .all()
        )
    certificates = []
    if company.certificates_ids:
        certificates = db.query(Certificate).filter(Certificate.id.in_(company.certificates_ids)).all()

    base = CompanyInDB.model_validate(company).model_dump()
    return CompanyDetail(
        **base,
        categories=[CategoryInDB.model_validate(c) for c in categories],
        certificates=[CertificateInDB.model_validate(c) for c in certificates],
        membership_type=(
            MembershipTypeInDB.model_validate(company.membership_type)
            if company.membership_type is not None else None
        ),
    )
