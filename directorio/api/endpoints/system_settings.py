# directorio/api/endpoints/system_settings.py
# type: ignore

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from directorio.database import get_db
from directorio.models.auth import User
from directorio.schemas.settings import SystemSettingsInDB, SystemSettingsUpdate
from directorio.services.settings import get_or_create_settings
from directorio.api.endpoints.auth import get_admin_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SystemSettingsInDB)
def read_system_settings(db: Session = Depends(get_db)):
    """Configuración pública (marca, idioma, banderas). Se crea en la primera lectura."""
    return get_or_create_settings(db)


@router.put("", response_model=SystemSettingsInDB)
def update_system_settings(
    settings_in: SystemSettingsUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Actualización parcial. Requiere admin."""
    settings = get_or_create_settings(db)

    update_data = settings_in.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(settings, key, value)

    db.add(settings)
    db.commit()
    db.refresh(settings)

    if "modo_mantenimiento" in update_data:
        logger.warning(
            "Modo mantenimiento %s por el usuario %s",
            "activado" if settings.modo_mantenimiento else "desactivado", admin.id,
        )
    return settings
