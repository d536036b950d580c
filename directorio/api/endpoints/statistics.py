# directorio/api/endpoints/statistics.py
# type: ignore

from datetime import timedelta
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from directorio.database import get_db, utcnow
from directorio.models.auth import User
from directorio.models.opinion import Opinion, OPINION_PENDING
from directorio.models.payment import MembershipPayment, PAYMENT_SUCCEEDED
from directorio.models.platform import Company, COMPANY_ACTIVE
from directorio.schemas.platform import DirectoryStatistics
from directorio.api.endpoints.auth import get_admin_user

router = APIRouter()

# Ventana de "registros nuevos"
NEW_REGISTRATION_DAYS = 30


@router.get("", response_model=DirectoryStatistics)
def read_statistics(db: Session = Depends(get_db), admin: User = Depends(get_admin_user)):
    """Indicadores del panel de administración."""
    since = utcnow() - timedelta(days=NEW_REGISTRATION_DAYS)

    revenue = (
        db.query(func.coalesce(func.sum(MembershipPayment.amount), 0))
        .filter(MembershipPayment.status == PAYMENT_SUCCEEDED)
        .scalar()
    )

    return {
        "total_companies": db.query(Company).count(),
        "active_companies": db.query(Company).filter(Company.estado == COMPANY_ACTIVE).count(),
        "total_users": db.query(User).count(),
        "new_registrations": db.query(Company).filter(Company.created_at >= since).count(),
        "pending_opinions": db.query(Opinion).filter(Opinion.estado == OPINION_PENDING).count(),
        "total_revenue": float(revenue or 0),
    }
