# directorio/models/settings.py
# type: ignore

from sqlalchemy import Column, Integer, String, Text, Boolean
from directorio.core.config import DEFAULT_MAX_FILE_SIZE_MB
from directorio.database import Base, TimestampMixin, JSONType


class SystemSettings(TimestampMixin, Base):
    """Registro único con la marca y las opciones globales de la instalación."""
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True)

    # Marca
    nombre_sistema = Column(String(255), nullable=False, default="Directorio Empresarial")
    descripcion_sistema = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)
    favicon_url = Column(Text, nullable=True)
    color_primario = Column(String(20), nullable=False, default="#0f172a")
    color_secundario = Column(String(20), nullable=False, default="#64748b")
    color_acento = Column(String(20), nullable=False, default="#f59e0b")

    # Localización
    idioma = Column(String(10), nullable=False, default="es")
    moneda = Column(String(10), nullable=False, default="MXN")
    zona_horaria = Column(String(64), nullable=False, default="America/Mexico_City")

    # Contacto
    email_contacto = Column(String(255), nullable=True)
    telefono_contacto = Column(String(50), nullable=True)
    url_sistema = Column(Text, nullable=True)
    redes_sociales = Column(JSONType, nullable=False, default=dict)

    # Subconfiguraciones (blobs JSON)
    configuracion_seo = Column(JSONType, nullable=False, default=dict)
    configuracion_email = Column(JSONType, nullable=False, default=dict)
    configuracion_pago = Column(JSONType, nullable=False, default=dict)

    # Banderas
    modo_mantenimiento = Column(Boolean, nullable=False, default=False)
    registro_habilitado = Column(Boolean, nullable=False, default=True)

    # Límites de carga
    tamano_maximo_archivo_mb = Column(Integer, nullable=False, default=DEFAULT_MAX_FILE_SIZE_MB)
    tipos_archivo_permitidos = Column(
        JSONType,
        nullable=False,
        default=lambda: ["image/jpeg", "image/png", "image/webp", "image/gif", "image/svg+xml"],
    )
