# app/crud/crud_game_stats.py
import logging
from sqlalchemy.orm import Session

from app.schemas.game_stats import GameStatistics

logger = logging.getLogger("app.crud.game_stats")

def get_statistics(db: Session) -> GameStatistics:
    """Returns the single statistics row, creating it on first use."""
    stats = db.query(GameStatistics).order_by(GameStatistics.id).first()
    if stats is None:
        stats = GameStatistics(high_score=0, games_played=0)
        db.add(stats)
        db.commit()
        db.refresh(stats)
    return stats

def record_game_result(db: Session, final_score: int) -> GameStatistics:
    stats = get_statistics(db)
    stats.games_played += 1
    if final_score > stats.high_score:
        logger.info(f"New high score: {final_score} (previous {stats.high_score})")
        stats.high_score = final_score
    db.commit()
    db.refresh(stats)
    return stats
