# directorio/core/config.py
# type: ignore
"""
Configuración central. Carga las variables de entorno desde el archivo .env
y las expone como constantes tipadas.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ***************************************************************
# 1. Base de datos
# ***************************************************************
DATABASE_URL: str = os.getenv("DATABASE_URL", "")

# ***************************************************************
# 2. Seguridad (JWT)
# ***************************************************************
# ¡Cambia esto en producción!
SECRET_KEY: str = os.getenv("SECRET_KEY", "CLAVE_DE_DESARROLLO_CAMBIAR_EN_PRODUCCION")
ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

# Si está definido, el inicio de sesión federado debe enviarlo en X-Identity-Secret
IDENTITY_SHARED_SECRET: str = os.getenv("IDENTITY_SHARED_SECRET", "")

# ***************************************************************
# 3. Pagos (Stripe)
# ***************************************************************
STRIPE_SECRET_KEY: str = os.getenv("STRIPE_SECRET_KEY", "")
STRIPE_WEBHOOK_SECRET: str = os.getenv("STRIPE_WEBHOOK_SECRET", "")
PAYMENT_CURRENCY: str = os.getenv("PAYMENT_CURRENCY", "mxn")

# ***************************************************************
# 4. Archivos, CORS y logging
# ***************************************************************
UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", os.path.join("uploads", "images"))
DEFAULT_MAX_FILE_SIZE_MB: int = int(os.getenv("MAX_FILE_SIZE_MB", "10"))

_raw_origins = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: list[str] = (
    [origin.strip() for origin in _raw_origins.split(",") if origin.strip()]
    if _raw_origins
    else []
)

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
