# app/api/categories.py
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.crud import crud_category
from app.models.category import CategoryPublic

logger = logging.getLogger("app.api.categories")  # Logger for this module
router = APIRouter()

@router.get("/", response_model=List[CategoryPublic])
def list_categories(
    db: Session = Depends(deps.get_db),
    include_disabled: bool = Query(False, description="Also return categories that are switched off."),
):
    """Categories players can pick for a game."""
    items = crud_category.get_all_categories(db) if include_disabled else crud_category.get_enabled_categories(db)
    return [CategoryPublic.model_validate(c) for c in items]

@router.get("/{name}", response_model=CategoryPublic)
def get_category(name: str, db: Session = Depends(deps.get_db)):
    item = crud_category.get_category_by_name(db, name)
    if not item:
        raise HTTPException(status_code=404, detail=f"Category '{name}' not found.")
    return CategoryPublic.model_validate(item)
