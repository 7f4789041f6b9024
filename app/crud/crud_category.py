# app/crud/crud_category.py
import logging
from typing import List
from sqlalchemy.orm import Session

from app.schemas.category import Category
from app.services.normalizer import normalize_category_name

logger = logging.getLogger("app.crud.category")

# name, display name, icon, hint
PREDEFINED_CATEGORIES = [
    ("PRENOM", "First Name", "👤", "A person's first name"),
    ("VILLE", "City", "🏙️", "A city of the world"),
    ("PAYS", "Country", "🌍", "A country of the world"),
    ("ANIMAL", "Animal", "🐾", "An animal"),
    ("FRUIT", "Fruit", "🍎", "A fruit"),
    ("LEGUME", "Vegetable", "🥕", "A vegetable"),
    ("METIER", "Job", "👔", "A profession or job"),
    ("COULEUR", "Color", "🎨", "A color"),
    ("OBJET", "Object", "📦", "An everyday object"),
    ("MARQUE", "Brand", "🏷️", "A commercial brand"),
]

def get_category_by_name(db: Session, name: str) -> Category | None:
    """Looks a category up by internal name; the name is normalized first ("animal " -> "ANIMAL")."""
    internal_name = normalize_category_name(name)
    if not internal_name:
        return None
    return db.query(Category).filter(Category.name == internal_name).first()

def get_enabled_categories(db: Session) -> List[Category]:
    return db.query(Category).filter(Category.enabled == True).order_by(Category.id).all()

def get_all_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.id).all()

def create_category(
    db: Session,
    name: str,
    display_name: str,
    icon: str | None = None,
    hint: str | None = None,
    predefined: bool = False,
) -> Category:
    internal_name = normalize_category_name(name)
    if not internal_name:
        raise ValueError("Category name must contain at least one letter or number")
    if not display_name or not display_name.strip():
        raise ValueError("Display name cannot be empty")
    if get_category_by_name(db, internal_name):
        raise ValueError(f"A category named '{internal_name}' already exists")

    db_item = Category(
        name=internal_name,
        display_name=display_name.strip(),
        icon=icon.strip() if icon else "📝",
        hint=hint.strip() if hint else "A custom category",
        predefined=predefined,
    )
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item

def seed_predefined_categories(db: Session) -> int:
    """Creates missing predefined categories. Idempotent; returns how many were created."""
    created = 0
    for name, display_name, icon, hint in PREDEFINED_CATEGORIES:
        existing = get_category_by_name(db, name)
        if existing:
            if not existing.predefined:
                existing.predefined = True
                db.commit()
                logger.info(f"Marked existing category {name} as predefined.")
            continue
        create_category(db, name, display_name, icon, hint, predefined=True)
        created += 1
    logger.info(f"Predefined categories seeded: {created} created, {len(PREDEFINED_CATEGORIES) - created} already present.")
    return created
