# app/schemas/validated_word.py
from sqlalchemy import Column, String, Integer, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.db.base_class import Base

class ValidatedWord(Base):
    """A (normalized word, category internal name) pair confirmed VALID at least once."""
    __tablename__ = "validated_words"

    id = Column(Integer, primary_key=True, index=True)
    word = Column(String, nullable=False)
    category = Column(String, nullable=False)
    validated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (UniqueConstraint('word', 'category', name='_word_category_uc'),)
