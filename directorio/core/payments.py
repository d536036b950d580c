# directorio/core/payments.py
# type: ignore
"""
Cliente del procesador de pagos (Stripe).

Los endpoints reciben un `PaymentGateway` mediante `Depends(get_payment_gateway)`,
lo que permite sustituirlo en pruebas con `app.dependency_overrides`.
"""

import logging
from typing import Any, Dict, Optional

import stripe

from directorio.core.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Error devuelto por el procesador; el mensaje se expone tal cual."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class WebhookSignatureError(PaymentGatewayError):
    pass


class PaymentGateway:
    """Envoltura mínima del SDK de Stripe usada por la API."""

    def __init__(self, api_key: str = STRIPE_SECRET_KEY, webhook_secret: str = STRIPE_WEBHOOK_SECRET):
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def _ensure_configured(self):
        if not self.api_key:
            raise PaymentGatewayError("El procesador de pagos no está configurado (STRIPE_SECRET_KEY).")

    def create_payment_intent(self, amount_cents: int, currency: str, metadata: Dict[str, str]) -> Dict[str, Any]:
        """Crea un PaymentIntent y devuelve {id, client_secret, status}."""
        self._ensure_configured()
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount_cents,
                currency=currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as e:
            logger.error("Stripe rechazó la creación del PaymentIntent: %s", e.user_message or str(e))
            raise PaymentGatewayError(e.user_message or str(e)) from e
        return {"id": intent.id, "client_secret": intent.client_secret, "status": intent.status}

    def retrieve_payment_intent(self, intent_id: str) -> Dict[str, Any]:
        """Devuelve {id, status, amount, currency} del PaymentIntent."""
        self._ensure_configured()
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.api_key)
        except stripe.StripeError as e:
            raise PaymentGatewayError(e.user_message or str(e)) from e
        return {
            "id": intent.id,
            "status": intent.status,
            "amount": intent.amount,
            "currency": intent.currency,
        }

    def create_customer(self, email: str, name: Optional[str] = None) -> str:
        self._ensure_configured()
        try:
            customer = stripe.Customer.create(api_key=self.api_key, email=email, name=name or email)
        except stripe.StripeError as e:
            raise PaymentGatewayError(e.user_message or str(e)) from e
        return customer.id

    def retrieve_customer(self, customer_id: str) -> Optional[str]:
        """Devuelve el ID si el cliente existe y no fue eliminado."""
        self._ensure_configured()
        try:
            customer = stripe.Customer.retrieve(customer_id, api_key=self.api_key)
        except stripe.InvalidRequestError:
            return None
        except stripe.StripeError as e:
            raise PaymentGatewayError(e.user_message or str(e)) from e
        if getattr(customer, "deleted", False):
            return None
        return customer.id

    def construct_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """Verifica la firma del webhook y devuelve {type, object_id, status}."""
        if not self.webhook_secret:
            raise WebhookSignatureError("STRIPE_WEBHOOK_SECRET no está configurado.")
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            raise WebhookSignatureError("Falló la verificación de la firma del webhook.") from e
        obj = event.data.object
        return {
            "type": event.type,
            "object_id": getattr(obj, "id", None),
            "status": getattr(obj, "status", None),
        }


# Estados de Stripe -> estados de MembershipPayment
STRIPE_STATUS_MAP = {
    "succeeded": "succeeded",
    "canceled": "canceled",
    "requires_payment_method": "failed",
    "processing": "pending",
    "requires_confirmation": "pending",
    "requires_action": "pending",
    "requires_capture": "pending",
}


def map_intent_status(stripe_status: str) -> str:
    return STRIPE_STATUS_MAP.get(stripe_status, "pending")


_gateway: Optional[PaymentGateway] = None


def get_payment_gateway() -> PaymentGateway:
    """Dependencia de FastAPI: una sola instancia por proceso."""
    global _gateway
    if _gateway is None:
        _gateway = PaymentGateway()
    return _gateway
