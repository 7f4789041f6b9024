# app/schemas/system.py
from sqlalchemy import Column, String, Integer, DateTime, Text
from sqlalchemy.sql import func
from app.db.base_class import Base

class SystemAlert(Base):
    """Errors worth an operator's attention: unknown categories, crashing validators, storage failures."""
    __tablename__ = "systemalerts"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    level = Column(String, default="ERROR") # 'ERROR' or 'CRITICAL'
    message = Column(String, nullable=False)
    details = Column(Text, nullable=True) # Stack trace, if any
