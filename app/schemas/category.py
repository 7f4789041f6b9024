# app/schemas/category.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime
from sqlalchemy.sql import func
from app.db.base_class import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False) # Internal name, e.g. "ANIMAL"
    display_name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    hint = Column(String, nullable=True)
    enabled = Column(Boolean, default=True, nullable=False, index=True)
    predefined = Column(Boolean, default=False, nullable=False) # Seeded at startup, never deleted
    created_at = Column(DateTime(timezone=True), server_default=func.now())
