# directorio/api/endpoints/uploads.py
# type: ignore

import logging
import os
import time
from uuid import uuid4
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session
from typing import List

from directorio.database import get_db
from directorio.core.config import UPLOAD_DIR
from directorio.models.auth import User
from directorio.models.settings import SystemSettings
from directorio.schemas.common import UploadResponse, MessageResponse
from directorio.services.settings import get_or_create_settings
from directorio.api.endpoints.auth import get_staff_user

logger = logging.getLogger(__name__)

router = APIRouter()

# Prefijo público bajo el que main.py sirve UPLOAD_DIR
PUBLIC_PREFIX = "/uploads/images"
MAX_FILES_PER_REQUEST = 10


def _check_file(upload: UploadFile, content: bytes, settings: SystemSettings) -> None:
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Solo se permiten archivos de imagen.")

    allowed = settings.tipos_archivo_permitidos or []
    if allowed and content_type not in allowed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tipo de archivo no permitido: {content_type}.",
        )

    max_bytes = settings.tamano_maximo_archivo_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"El archivo excede el máximo de {settings.tamano_maximo_archivo_mb} MB.",
        )


def _store(upload: UploadFile, content: bytes) -> dict:
    extension = os.path.splitext(upload.filename or "")[1].lower()
    filename = f"{uuid4()}_{int(time.time() * 1000)}{extension}"
    os.makedirs(UPLOAD_DIR, exist_ok=True)
    with open(os.path.join(UPLOAD_DIR, filename), "wb") as fh:
        fh.write(content)
    return {"image_url": f"{PUBLIC_PREFIX}/{filename}", "filename": filename}


@router.post("/images", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
def upload_image(
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_staff_user),
):
    """Guarda una imagen con nombre único y devuelve su URL pública."""
    settings = get_or_create_settings(db)
    content = image.file.read()
    _check_file(image, content, settings)
    stored = _store(image, content)
    logger.info("Imagen %s subida por el usuario %s", stored["filename"], user.id)
    return stored


@router.post("/images/batch", response_model=List[UploadResponse], status_code=status.HTTP_201_CREATED)
def upload_images(
    images: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_staff_user),
):
    """Varias imágenes en una sola solicitud; se validan todas antes de guardar."""
    if len(images) > MAX_FILES_PER_REQUEST:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Máximo {MAX_FILES_PER_REQUEST} archivos por solicitud.",
        )

    settings = get_or_create_settings(db)
    contents = []
    for image in images:
        content = image.file.read()
        _check_file(image, content, settings)
        contents.append((image, content))

    stored = [_store(image, content) for image, content in contents]
    logger.info("%s imágenes subidas por el usuario %s", len(stored), user.id)
    return stored


@router.delete("/images/{filename}", response_model=MessageResponse)
def delete_image(filename: str, user: User = Depends(get_staff_user)):
    # Solo nombres planos: nada de rutas relativas
    if not filename or filename != os.path.basename(filename) or "\\" in filename or filename.startswith("."):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nombre de archivo inválido.")

    path = os.path.join(UPLOAD_DIR, filename)
    if not os.path.isfile(path):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Imagen no encontrada.")

    os.remove(path)
    logger.info("Imagen %s eliminada por el usuario %s", filename, user.id)
    return {"message": "Imagen eliminada correctamente."}
