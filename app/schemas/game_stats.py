# app/schemas/game_stats.py
from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.sql import func
from app.db.base_class import Base

class GameStatistics(Base):
    """Single row holding cross-game counters."""
    __tablename__ = "game_statistics"

    id = Column(Integer, primary_key=True, index=True)
    high_score = Column(Integer, default=0, nullable=False)
    games_played = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
