# directorio/api/endpoints/certificates.py
# type: ignore

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from directorio.database import get_db
from directorio.models.auth import User
from directorio.models.catalog import Certificate
from directorio.schemas.catalog import CertificateCreate, CertificateUpdate, CertificateInDB
from directorio.services.companies import remove_id_from_companies
from directorio.api.endpoints.auth import get_admin_user

logger = logging.getLogger(__name__)

router = APIRouter()


def get_certificate_or_404(certificate_id: int, db: Session) -> Certificate:
    certificate = db.query(Certificate).filter(Certificate.id == certificate_id).first()
    if not certificate:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Certificado no encontrado.")
    return certificate


@router.get("", response_model=List[CertificateInDB])
def read_certificates(db: Session = Depends(get_db)):
    return db.query(Certificate).order_by(Certificate.nombre_certificado).all()


@router.get("/{certificate_id}", response_model=CertificateInDB)
def read_certificate(certificate_id: int, db: Session = Depends(get_db)):
    return get_certificate_or_404(certificate_id, db)


@router.post("", response_model=CertificateInDB, status_code=status.HTTP_201_CREATED)
def create_certificate(
    certificate_in: CertificateCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    db_certificate = Certificate(**certificate_in.model_dump())
    db.add(db_certificate)
    db.commit()
    db.refresh(db_certificate)
    logger.info("Certificado %s creado", db_certificate.id)
    return db_certificate


@router.put("/{certificate_id}", response_model=CertificateInDB)
def update_certificate(
    certificate_id: int,
    certificate_in: CertificateUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    certificate = get_certificate_or_404(certificate_id, db)

    for key, value in certificate_in.model_dump(exclude_unset=True).items():
        setattr(certificate, key, value)

    db.add(certificate)
    db.commit()
    db.refresh(certificate)
    return certificate


@router.delete("/{certificate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_certificate(
    certificate_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Elimina el certificado y lo quita de las empresas que lo mostraban."""
    certificate = get_certificate_or_404(certificate_id, db)
    remove_id_from_companies(db, "certificates_ids", certificate.id)
    db.delete(certificate)
    db.commit()
