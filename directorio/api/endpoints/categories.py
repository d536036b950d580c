# directorio/api/endpoints/categories.py
# type: ignore

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from directorio.database import get_db
from directorio.models.auth import User
from directorio.models.catalog import Category
from directorio.schemas.catalog import CategoryCreate, CategoryUpdate, CategoryInDB
from directorio.services.companies import remove_id_from_companies
from directorio.api.endpoints.auth import get_admin_user

logger = logging.getLogger(__name__)

router = APIRouter()


def get_category_or_404(category_id: int, db: Session) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Categoría no encontrada.")
    return category


# Lectura pública (el directorio filtra por categoría)
@router.get("", response_model=List[CategoryInDB])
def read_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.nombre_categoria).all()


@router.get("/{category_id}", response_model=CategoryInDB)
def read_category(category_id: int, db: Session = Depends(get_db)):
    return get_category_or_404(category_id, db)


@router.post("", response_model=CategoryInDB, status_code=status.HTTP_201_CREATED)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Crea una categoría. Requiere admin."""
    db_category = Category(**category_in.model_dump())
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


@router.put("/{category_id}", response_model=CategoryInDB)
def update_category(
    category_id: int,
    category_in: CategoryUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    category = get_category_or_404(category_id, db)

    for key, value in category_in.model_dump(exclude_unset=True).items():
        setattr(category, key, value)

    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user),
):
    """Elimina la categoría y la quita de las empresas que la usaban."""
    category = get_category_or_404(category_id, db)
    touched = remove_id_from_companies(db, "categories_ids", category.id)
    db.delete(category)
    db.commit()
    logger.info("Categoría %s eliminada (%s empresas actualizadas)", category_id, touched)
