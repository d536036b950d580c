# directorio/schemas/payment.py
# type: ignore

from pydantic import Field, field_serializer
from typing import Optional, Literal
from decimal import Decimal
from datetime import datetime

from directorio.schemas.common import CamelModel

PaymentStatus = Literal["pending", "succeeded", "failed", "canceled"]

# -------------------------------------------------------------------
# Input Schemas
# -------------------------------------------------------------------

class PaymentIntentCreate(CamelModel):
    company_id: int
    membership_type_id: int
    # Si no se indica, se usa la primera opción de precio del plan
    periodicidad: Optional[str] = Field(None, max_length=50)

class PaymentConfirm(CamelModel):
    payment_intent_id: str = Field(..., min_length=1)

# -------------------------------------------------------------------
# Output Schemas
# -------------------------------------------------------------------

class PaymentIntentResponse(CamelModel):
    client_secret: Optional[str] = None
    payment_intent_id: str
    payment_id: int
    amount: Decimal
    currency: str

    @field_serializer("amount")
    def serialize_decimal(self, value: Decimal) -> float:
        return float(value)

class MembershipPaymentInDB(CamelModel):
    id: int
    user_id: Optional[int] = None
    company_id: Optional[int] = None
    membership_type_id: Optional[int] = None
    stripe_payment_intent_id: str
    amount: Decimal
    currency: str
    periodicidad: Optional[str] = None
    status: PaymentStatus
    created_at: datetime
    updated_at: datetime

    # Serializador: convierte Decimal a float para la salida JSON
    @field_serializer("amount")
    def serialize_decimal(self, value: Decimal) -> float:
        return float(value)

class CustomerResponse(CamelModel):
    customer_id: str
