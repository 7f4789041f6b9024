# app/crud/crud_system.py
import logging
from sqlalchemy.orm import Session
from app.schemas.system import SystemAlert
from typing import List

logger = logging.getLogger("app.crud.system")

def create_alert(db: Session, level: str, message: str, details: str | None = None) -> SystemAlert | None:
    """Creates a new system alert record."""
    try:
        alert = SystemAlert(level=level, message=message, details=details)
        db.add(alert)
        db.commit()
        db.refresh(alert)
        return alert
    except Exception as e:
        # Storage is unavailable, keep the alert in the regular log stream instead
        db.rollback()
        logger.critical(f"Failed to store alert [{level}] {message}: {e}")
        return None

def get_latest_alerts(db: Session, limit: int = 50) -> List[SystemAlert]:
    """Retrieves the most recent system alerts."""
    return db.query(SystemAlert).order_by(SystemAlert.timestamp.desc(), SystemAlert.id.desc()).limit(limit).all()
