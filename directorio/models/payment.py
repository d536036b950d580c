# directorio/models/payment.py
# type: ignore

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from directorio.database import Base, TimestampMixin


PAYMENT_PENDING = "pending"
PAYMENT_SUCCEEDED = "succeeded"
PAYMENT_FAILED = "failed"
PAYMENT_CANCELED = "canceled"
PAYMENT_STATES = (PAYMENT_PENDING, PAYMENT_SUCCEEDED, PAYMENT_FAILED, PAYMENT_CANCELED)


class MembershipPayment(TimestampMixin, Base):
    """Pago de una membresía, identificado por el PaymentIntent del procesador."""
    __tablename__ = "membership_payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    # Se conserva el registro (auditoría) aunque se elimine la empresa o el plan
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    membership_type_id = Column(Integer, ForeignKey("membership_types.id", ondelete="SET NULL"), nullable=True)

    stripe_payment_intent_id = Column(String(255), nullable=False, index=True)
    # NUMERIC(10,2) para precisión financiera
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(10), nullable=False)
    periodicidad = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default=PAYMENT_PENDING)

    company = relationship("Company")
    membership_type = relationship("MembershipType")

    __table_args__ = (
        UniqueConstraint("stripe_payment_intent_id", name="uq_membership_payment_intent"),
    )
