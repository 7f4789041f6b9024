# app/models/game.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List

from app.core.config import settings
from app.models.category import CategoryPublic
from app.models.enums import RoundEndTrigger, RoundState
from app.models.validation import ValidationResult

class GameConfig(BaseModel):
    categories: List[CategoryPublic] = Field(min_length=1)
    number_of_rounds: int = Field(default=settings.DEFAULT_NUMBER_OF_ROUNDS, gt=0)
    round_duration_seconds: int = Field(default=settings.DEFAULT_ROUND_DURATION_SECONDS, gt=0)
    excluded_letters: str = settings.EXCLUDED_LETTERS

class CategoryOutcome(BaseModel):
    category: str # Internal name
    word: str = ""
    result: ValidationResult
    points: int = 0

class RoundSummary(BaseModel):
    round_number: int
    total_rounds: int
    letter: str
    trigger: RoundEndTrigger
    outcomes: List[CategoryOutcome] = []
    points: int = 0 # Points gained this round
    total_score: int = 0 # Game score after this round

class GameSummary(BaseModel):
    rounds_played: int
    final_score: int
    max_possible_score: int
    rating: str
    high_score: int | None = None
    games_played: int | None = None

class GameStatisticsPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    high_score: int = 0
    games_played: int = 0
    updated_at: datetime | None = None

# --- HTTP payloads ---

class StartGameRequest(BaseModel):
    categories: List[str] | None = None # Internal names; defaults to the first enabled ones
    number_of_rounds: int = Field(default=settings.DEFAULT_NUMBER_OF_ROUNDS, gt=0)
    round_duration_seconds: int = Field(default=settings.DEFAULT_ROUND_DURATION_SECONDS, gt=0)

class SubmitAnswersRequest(BaseModel):
    answers: Dict[str, str] # category internal name -> word

class GameStatePublic(BaseModel):
    game_id: str
    state: RoundState
    round_number: int
    total_rounds: int
    letter: str | None = None
    remaining_seconds: int | None = None
    score: int = 0
    categories: List[CategoryPublic] = []
    submissions: Dict[str, str] = {}
    inputs_locked: bool = False
    game_over: bool = False
    last_round: RoundSummary | None = None
    summary: GameSummary | None = None
