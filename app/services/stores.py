# app/services/stores.py
"""
Read/write adapters the validation pipeline uses to reach the database.

Validation runs in worker threads, so these adapters never share a Session:
each call opens one from the factory and closes it afterwards.
"""
from typing import Callable, Protocol

from sqlalchemy.orm import Session

from app.crud import crud_category, crud_validated_word
from app.db.session import SessionLocal
from app.models.category import CategoryPublic

class CategoryRepository(Protocol):
    def find_by_name(self, name: str) -> CategoryPublic | None: ...

class ValidationCache(Protocol):
    def has(self, word: str, category_name: str) -> bool: ...

    def put(self, word: str, category_name: str) -> None: ...

class SqlCategoryRepository:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def find_by_name(self, name: str) -> CategoryPublic | None:
        db = self.session_factory()
        try:
            category = crud_category.get_category_by_name(db, name)
            return CategoryPublic.model_validate(category) if category else None
        finally:
            db.close()

class SqlValidationCache:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def has(self, word: str, category_name: str) -> bool:
        db = self.session_factory()
        try:
            return crud_validated_word.is_word_validated(db, word, category_name)
        finally:
            db.close()

    def put(self, word: str, category_name: str) -> None:
        db = self.session_factory()
        try:
            crud_validated_word.save_validated_word(db, word, category_name)
        finally:
            db.close()
