# directorio/services/memberships.py
# type: ignore
"""
Vinculación entre pagos de membresía y la ficha de la empresa.

Un pago `succeeded` aplica el plan a la empresa (una sola vez). Un pago
`failed` o `canceled` solo queda registrado para auditoría: la membresía
anterior de la empresa no se toca.
"""

import calendar
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from directorio.database import utcnow
from directorio.models.catalog import MembershipType
from directorio.models.payment import (
    MembershipPayment,
    PAYMENT_STATES,
    PAYMENT_SUCCEEDED,
)
from directorio.models.platform import Company

logger = logging.getLogger(__name__)

# Meses que cubre cada periodicidad
PERIOD_MONTHS = {
    "mensual": 1,
    "bimestral": 2,
    "trimestral": 3,
    "semestral": 6,
    "anual": 12,
    "monthly": 1,
    "quarterly": 3,
    "yearly": 12,
}


def resolve_price(plan: MembershipType, periodicidad: Optional[str] = None) -> dict:
    """
    Devuelve la opción de precio {periodicidad, costo} a cobrar.
    Sin periodicidad se usa la primera opción del plan.
    """
    options = plan.opciones_precios or []
    if periodicidad:
        wanted = periodicidad.strip().lower()
        options = [o for o in options if str(o.get("periodicidad", "")).strip().lower() == wanted]
        if not options:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"El plan no tiene precio para la periodicidad '{periodicidad}'.",
            )
    if not options:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El plan no tiene precios definidos.")

    option = options[0]
    try:
        cost = Decimal(str(option.get("costo", 0))).quantize(Decimal("0.01"))
    except (InvalidOperation, TypeError):
        cost = Decimal("0")
    if cost <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Costo de membresía inválido.")
    return {"periodicidad": option.get("periodicidad"), "costo": cost}


def compute_period_end(start: date, periodicidad: Optional[str]) -> date:
    """Fecha de fin de la membresía; periodicidad desconocida = un mes."""
    months = PERIOD_MONTHS.get((periodicidad or "").strip().lower(), 1)
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def apply_membership(company: Company, payment: MembershipPayment, today: Optional[date] = None):
    """Actualiza plan y datos de facturación de la empresa con un pago exitoso."""
    start = today or utcnow().date()
    company.membership_type_id = payment.membership_type_id
    company.forma_pago = "stripe"
    company.fecha_inicio_membresia = start
    company.fecha_fin_membresia = compute_period_end(start, payment.periodicidad)
    company.notas_membresia = f"Pago {payment.stripe_payment_intent_id}"


def apply_payment_status(db: Session, payment: MembershipPayment, new_status: str) -> MembershipPayment:
    """
    Registra el estado informado por el procesador.

    Un pago ya `succeeded` no cambia de estado ni vuelve a aplicarse, así que
    confirmaciones y webhooks repetidos son inocuos.
    """
    if new_status not in PAYMENT_STATES:
        raise ValueError(f"Estado de pago desconocido: {new_status}")

    if payment.status == PAYMENT_SUCCEEDED:
        return payment

    payment.status = new_status
    if new_status == PAYMENT_SUCCEEDED and payment.company_id is not None:
        company = db.query(Company).filter(Company.id == payment.company_id).first()
        if company is not None:
            apply_membership(company, payment)
            db.add(company)
            logger.info(
                "Membresía %s aplicada a la empresa %s (pago %s)",
                payment.membership_type_id, company.id, payment.stripe_payment_intent_id,
            )
    else:
        logger.info("Pago %s registrado como '%s'", payment.stripe_payment_intent_id, new_status)

    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment
