# app/api/deps.py
import logging

from app.db.session import SessionLocal
from app.services.validation_service import ValidationService, get_validation_service as build_validation_service

logger = logging.getLogger("app.api.deps")  # Logger for this module

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_validation_service() -> ValidationService:
    """Process-wide validation pipeline; overridden in tests."""
    return build_validation_service()
