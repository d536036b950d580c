# directorio/services/settings.py
# type: ignore

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from directorio.models.settings import SystemSettings

SETTINGS_ID = 1


def get_or_create_settings(db: Session) -> SystemSettings:
    """Devuelve el registro único de configuración, creándolo con valores por defecto."""
    settings = db.query(SystemSettings).filter(SystemSettings.id == SETTINGS_ID).first()
    if settings is not None:
        return settings

    settings = SystemSettings(id=SETTINGS_ID)
    db.add(settings)
    try:
        db.commit()
    except IntegrityError:
        # Otra solicitud lo creó primero
        db.rollback()
        return db.query(SystemSettings).filter(SystemSettings.id == SETTINGS_ID).one()
    db.refresh(settings)
    return settings
