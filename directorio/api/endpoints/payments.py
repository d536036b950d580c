# directorio/api/endpoints/payments.py
# type: ignore

import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Header, Request, status, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional

from directorio.database import get_db
from directorio.core.config import PAYMENT_CURRENCY
from directorio.core.payments import (
    PaymentGateway,
    PaymentGatewayError,
    WebhookSignatureError,
    get_payment_gateway,
    map_intent_status,
)
from directorio.models.auth import User, ROLE_ADMIN
from directorio.models.catalog import MembershipType, VISIBILITY_PUBLIC
from directorio.models.payment import (
    MembershipPayment,
    PAYMENT_PENDING,
    PAYMENT_SUCCEEDED,
    PAYMENT_FAILED,
    PAYMENT_CANCELED,
    PAYMENT_STATES,
)
from directorio.models.platform import Company
from directorio.schemas.payment import (
    PaymentIntentCreate,
    PaymentConfirm,
    PaymentIntentResponse,
    MembershipPaymentInDB,
    CustomerResponse,
)
from directorio.services.memberships import resolve_price, apply_payment_status
from directorio.api.endpoints.auth import (
    get_current_user,
    get_admin_user,
    get_staff_user,
    check_company_ownership,
    check_maintenance,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Eventos del webhook -> estado del pago
WEBHOOK_EVENTS = {
    "payment_intent.succeeded": PAYMENT_SUCCEEDED,
    "payment_intent.payment_failed": PAYMENT_FAILED,
    "payment_intent.canceled": PAYMENT_CANCELED,
}


def check_payment_access(payment: MembershipPayment, user: User) -> None:
    """Solo el usuario que inició el pago o un admin."""
    if user.role == ROLE_ADMIN or payment.user_id == user.id:
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acceso denegado a este pago.")


# ***************************************************************
# 1. Crear PaymentIntent
# ***************************************************************
@router.post("/create-intent", response_model=PaymentIntentResponse, status_code=status.HTTP_201_CREATED)
def create_payment_intent(
    intent_in: PaymentIntentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_staff_user),
    _: Optional[User] = Depends(check_maintenance),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Inicia el cobro de un plan para una empresa.
    El pago queda 'pending' hasta que el procesador confirme.
    """
    company = db.query(Company).filter(Company.id == intent_in.company_id).first()
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empresa no encontrada.")
    check_company_ownership(company, user)

    plan = db.query(MembershipType).filter(MembershipType.id == intent_in.membership_type_id).first()
    # Un plan privado no existe para quien no es admin
    if not plan or (plan.visibilidad != VISIBILITY_PUBLIC and user.role != ROLE_ADMIN):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tipo de membresía no encontrado.")

    price = resolve_price(plan, intent_in.periodicidad)
    amount: Decimal = price["costo"]
    amount_cents = int((amount * 100).to_integral_value())

    try:
        intent = gateway.create_payment_intent(
            amount_cents=amount_cents,
            currency=PAYMENT_CURRENCY,
            metadata={
                "company_id": str(company.id),
                "membership_type_id": str(plan.id),
                "user_id": str(user.id),
                "periodicidad": price["periodicidad"] or "",
            },
        )
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    db_payment = MembershipPayment(
        user_id=user.id,
        company_id=company.id,
        membership_type_id=plan.id,
        stripe_payment_intent_id=intent["id"],
        amount=amount,
        currency=PAYMENT_CURRENCY,
        periodicidad=price["periodicidad"],
        status=PAYMENT_PENDING,
    )
    db.add(db_payment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("PaymentIntent duplicado: %s", intent["id"])
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya existe un pago registrado para este PaymentIntent.",
        )
    db.refresh(db_payment)

    logger.info(
        "Pago %s creado (%s %s) para la empresa %s",
        db_payment.id, amount, PAYMENT_CURRENCY, company.id,
    )
    return {
        "client_secret": intent.get("client_secret"),
        "payment_intent_id": intent["id"],
        "payment_id": db_payment.id,
        "amount": amount,
        "currency": PAYMENT_CURRENCY,
    }


# ***************************************************************
# 2. Confirmación desde el cliente
# ***************************************************************
@router.post("/confirm", response_model=MembershipPaymentInDB)
def confirm_payment(
    confirm_in: PaymentConfirm,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Consulta el estado del PaymentIntent en el procesador y lo registra."""
    payment = (
        db.query(MembershipPayment)
        .filter(MembershipPayment.stripe_payment_intent_id == confirm_in.payment_intent_id)
        .first()
    )
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pago no encontrado.")
    check_payment_access(payment, user)

    try:
        intent = gateway.retrieve_payment_intent(payment.stripe_payment_intent_id)
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    return apply_payment_status(db, payment, map_intent_status(intent["status"]))


# ***************************************************************
# 3. Webhook del procesador
# ***************************************************************
@router.post("/webhook")
async def payment_webhook(
    request: Request,
    db: Session = Depends(get_db),
    stripe_signature: Optional[str] = Header(None),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Recibe los eventos firmados del procesador. Los eventos e intents
    desconocidos se reconocen (200) para que no se reintenten.
    """
    payload = await request.body()
    return await run_in_threadpool(process_webhook, db, gateway, payload, stripe_signature or "")


def process_webhook(db: Session, gateway: PaymentGateway, payload: bytes, signature: str) -> dict:
    """Verifica la firma y aplica el evento. Corre fuera del event loop."""
    try:
        event = gateway.construct_event(payload, signature)
    except WebhookSignatureError as e:
        logger.warning("Webhook rechazado: %s", e.message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    new_status = WEBHOOK_EVENTS.get(event["type"])
    if new_status is None:
        logger.info("Evento de webhook ignorado: %s", event["type"])
        return {"received": True}

    payment = (
        db.query(MembershipPayment)
        .filter(MembershipPayment.stripe_payment_intent_id == event["object_id"])
        .first()
    )
    if not payment:
        logger.warning("Webhook para un PaymentIntent desconocido: %s", event["object_id"])
        return {"received": True}

    apply_payment_status(db, payment, new_status)
    return {"received": True}


# ***************************************************************
# 4. Consulta de pagos
# ***************************************************************
@router.get("", response_model=List[MembershipPaymentInDB])
def read_payments(
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
    status_filter: Optional[str] = Query(None, alias="status"),
    company_id: Optional[int] = Query(None, alias="companyId"),
):
    if status_filter is not None and status_filter not in PAYMENT_STATES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Estado inválido: {status_filter}.")

    query = db.query(MembershipPayment)
    if status_filter:
        query = query.filter(MembershipPayment.status == status_filter)
    if company_id is not None:
        query = query.filter(MembershipPayment.company_id == company_id)
    return query.order_by(MembershipPayment.created_at.desc(), MembershipPayment.id.desc()).all()


@router.get("/{payment_id}", response_model=MembershipPaymentInDB)
def read_payment(payment_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    payment = db.query(MembershipPayment).filter(MembershipPayment.id == payment_id).first()
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pago no encontrado.")
    check_payment_access(payment, user)
    return payment


# ***************************************************************
# 5. Cliente del procesador
# ***************************************************************
@router.post("/customer", response_model=CustomerResponse)
def get_or_create_customer(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Reutiliza el cliente guardado si sigue vigente; si no, crea uno nuevo."""
    try:
        if user.stripe_customer_id:
            existing = gateway.retrieve_customer(user.stripe_customer_id)
            if existing:
                return {"customer_id": existing}
            logger.info("Cliente %s ya no existe; se creará otro", user.stripe_customer_id)

        customer_id = gateway.create_customer(user.email, user.display_name)
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    user.stripe_customer_id = customer_id
    db.add(user)
    db.commit()
    return {"customer_id": customer_id}
