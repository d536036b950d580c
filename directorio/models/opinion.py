# directorio/models/opinion.py
# type: ignore

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from directorio.database import Base, TimestampMixin


OPINION_PENDING = "pendiente"
OPINION_APPROVED = "aprobada"
OPINION_REJECTED = "rechazada"
OPINION_STATES = (OPINION_PENDING, OPINION_APPROVED, OPINION_REJECTED)


class Opinion(TimestampMixin, Base):
    """Reseña de una empresa, sujeta a moderación."""
    __tablename__ = "opinions"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    nombre = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    calificacion = Column(Integer, nullable=False)
    comentario = Column(Text, nullable=False)

    estado = Column(String(20), nullable=False, default=OPINION_PENDING, index=True)
    fecha_aprobacion = Column(DateTime(timezone=True), nullable=True)
    # Referencia al moderador; sin FK para conservar el dato si se elimina el usuario
    aprobado_por = Column(Integer, nullable=True)

    company = relationship("Company", back_populates="opinions")

    __table_args__ = (
        CheckConstraint("calificacion BETWEEN 1 AND 5", name="ck_opinion_calificacion"),
        CheckConstraint(
            "estado IN ('pendiente', 'aprobada', 'rechazada')",
            name="ck_opinion_estado",
        ),
    )
