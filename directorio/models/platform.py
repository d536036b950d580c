# directorio/models/platform.py
# type: ignore

from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from directorio.database import Base, TimestampMixin, JSONType


COMPANY_ACTIVE = "activo"
COMPANY_INACTIVE = "inactivo"
COMPANY_PENDING = "pendiente"
COMPANY_STATES = (COMPANY_ACTIVE, COMPANY_INACTIVE, COMPANY_PENDING)


# ***************************************************************
# Company (ficha del directorio empresarial)
# ***************************************************************
class Company(TimestampMixin, Base):
    """
    Empresa publicada en el directorio.

    Agrupa categorías y certificados por listas de IDs (sin tablas intermedias).
    Si `membership_type_id` apunta a un plan de pago, debe existir el
    MembershipPayment correspondiente; la base de datos no lo obliga.
    """
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    nombre_empresa = Column(String(255), nullable=False)
    logotipo_url = Column(Text, nullable=True)

    # Contacto
    telefono1 = Column(String(50), nullable=True)
    telefono2 = Column(String(50), nullable=True)
    email1 = Column(String(255), nullable=False)
    email2 = Column(String(255), nullable=True)
    sitio_web = Column(Text, nullable=True)

    # Presencia (listas de strings)
    paises_presencia = Column(JSONType, nullable=False, default=list)
    estados_presencia = Column(JSONType, nullable=False, default=list)
    ciudades_presencia = Column(JSONType, nullable=False, default=list)
    direccion_fisica = Column(Text, nullable=True)
    ubicacion_geografica = Column(JSONType, nullable=True)  # {"lat": .., "lng": ..}

    representantes_ventas = Column(JSONType, nullable=False, default=list)
    descripcion_empresa = Column(Text, nullable=True)
    galeria_productos_urls = Column(JSONType, nullable=False, default=list)
    categories_ids = Column(JSONType, nullable=False, default=list)
    certificates_ids = Column(JSONType, nullable=False, default=list)
    redes_sociales = Column(JSONType, nullable=False, default=dict)
    catalogo_digital_url = Column(Text, nullable=True)
    videos_urls = Column(JSONType, nullable=False, default=list)

    # Membresía y datos de facturación
    membership_type_id = Column(Integer, ForeignKey("membership_types.id", ondelete="SET NULL"), nullable=True)
    forma_pago = Column(String(50), nullable=True)
    fecha_inicio_membresia = Column(Date, nullable=True)
    fecha_fin_membresia = Column(Date, nullable=True)
    notas_membresia = Column(Text, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    estado = Column(String(20), nullable=False, default=COMPANY_ACTIVE)

    # Relaciones
    owner = relationship("User", back_populates="companies")
    membership_type = relationship("MembershipType", back_populates="companies")
    opinions = relationship("Opinion", back_populates="company", cascade="all, delete-orphan")
