# app/api/games.py
import asyncio
import logging
import uuid
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core.config import settings
from app.crud import crud_category, crud_game_stats
from app.models.category import CategoryPublic
from app.models.enums import RoundEndTrigger, RoundState
from app.models.game import (
    GameConfig,
    GameStatePublic,
    GameStatisticsPublic,
    GameSummary,
    RoundSummary,
    StartGameRequest,
    SubmitAnswersRequest,
)
from app.services.round_service import RoundStateMachine
from app.services.round_timer import RoundCountdown
from app.services.validation_service import ValidationService

logger = logging.getLogger("app.api.games")  # Logger for this module
router = APIRouter()

class ActiveGame:
    """A running solo game: its state machine, its countdown and what was shown to the player."""

    def __init__(self, game_id: str, config: GameConfig, validation_service: ValidationService):
        self.game_id = game_id
        self.machine = RoundStateMachine(
            config,
            validation_service,
            on_results=self.on_results,
            on_game_over=self.on_game_over,
        )
        self.countdown: RoundCountdown | None = None
        self.round_results: List[RoundSummary] = []
        self.final_summary: GameSummary | None = None
        self.stats_recorded = False

    def on_results(self, summary: RoundSummary):
        self.round_results.append(summary)
        logger.info(f"G:{self.game_id} - Round {summary.round_number} results: +{summary.points} (total {summary.total_score})")

    def on_game_over(self, summary: GameSummary):
        self.final_summary = summary

# Games live in memory only; a restart ends them.
active_games: Dict[str, ActiveGame] = {}

def _get_game(game_id: str) -> ActiveGame:
    game = active_games.get(game_id)
    if not game:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Game '{game_id}' not found.")
    return game

def _to_public(game: ActiveGame) -> GameStatePublic:
    machine = game.machine
    return GameStatePublic(
        game_id=game.game_id,
        state=machine.state,
        round_number=machine.round_number,
        total_rounds=machine.total_rounds,
        letter=machine.letter,
        remaining_seconds=game.countdown.remaining_seconds if game.countdown else None,
        score=machine.score,
        categories=machine.categories,
        submissions=machine.submissions,
        inputs_locked=machine.inputs_locked,
        game_over=machine.game_over,
        last_round=machine.last_summary,
        summary=machine.game_summary,
    )

async def finalize_round(game_id: str, trigger: RoundEndTrigger) -> RoundSummary | None:
    """
    Shared by the countdown and the stop endpoint. The state machine lets only
    the first trigger through; the scoring pass runs in a worker thread.
    """
    game = active_games.get(game_id)
    if not game:
        return None
    if trigger == RoundEndTrigger.MANUAL_STOP and game.countdown:
        game.countdown.cancel()

    summary = await asyncio.to_thread(game.machine.finish_round, trigger)
    if summary is None:
        logger.info(f"G:{game_id} - {trigger.value} ignored, round already finished.")
        return None
    game.machine.present_results()
    return summary

async def _handle_round_expired(game_id: str):
    try:
        logger.info(f"G:{game_id} - Round timer expired.")
        await finalize_round(game_id, RoundEndTrigger.TIMER_EXPIRED)
    except Exception as e:
        logger.error(f"G:{game_id} - Error while finishing an expired round: {e}", exc_info=True)

def _start_round_timer(game: ActiveGame):
    if game.countdown and game.countdown.running:
        logger.warning(f"G:{game.game_id} - Starting a new timer while an old one was still active. Cancelling old one.")
        game.countdown.cancel()
    game.countdown = RoundCountdown(
        game.machine.config.round_duration_seconds,
        on_expire=lambda: _handle_round_expired(game.game_id),
        tick_seconds=settings.TIMER_TICK_SECONDS,
        name=f"G:{game.game_id}",
    )
    game.countdown.start()

def _resolve_categories(db: Session, names: List[str] | None) -> List[CategoryPublic]:
    if not names:
        enabled = crud_category.get_enabled_categories(db)[: settings.DEFAULT_CATEGORY_COUNT]
        return [CategoryPublic.model_validate(c) for c in enabled]

    categories: List[CategoryPublic] = []
    for name in names:
        item = crud_category.get_category_by_name(db, name)
        if not item:
            raise HTTPException(status_code=404, detail=f"Category '{name}' not found.")
        if not item.enabled:
            raise HTTPException(status_code=400, detail=f"Category '{item.name}' is disabled.")
        if all(c.name != item.name for c in categories):
            categories.append(CategoryPublic.model_validate(item))
    return categories

@router.get("/statistics", response_model=GameStatisticsPublic)
def get_statistics(db: Session = Depends(deps.get_db)):
    return GameStatisticsPublic.model_validate(crud_game_stats.get_statistics(db))

@router.post("/", response_model=GameStatePublic, status_code=201)
async def start_game(
    request: StartGameRequest,
    db: Session = Depends(deps.get_db),
    service: ValidationService = Depends(deps.get_validation_service),
):
    """Starts a solo game and its first round."""
    categories = _resolve_categories(db, request.categories)
    if not categories:
        raise HTTPException(status_code=400, detail="No enabled categories available.")

    config = GameConfig(
        categories=categories,
        number_of_rounds=request.number_of_rounds,
        round_duration_seconds=request.round_duration_seconds,
        excluded_letters=settings.EXCLUDED_LETTERS,
    )
    game_id = uuid.uuid4().hex
    game = ActiveGame(game_id, config, service)
    active_games[game_id] = game
    game.machine.start_round()
    _start_round_timer(game)
    logger.info(f"G:{game_id} - Game started with {[c.name for c in categories]}, {config.number_of_rounds} rounds.")
    return _to_public(game)

@router.get("/{game_id}", response_model=GameStatePublic)
def get_game(game_id: str):
    return _to_public(_get_game(game_id))

@router.put("/{game_id}/answers", response_model=GameStatePublic)
def submit_answers(game_id: str, request: SubmitAnswersRequest):
    game = _get_game(game_id)
    for category_name, word in request.answers.items():
        try:
            accepted = game.machine.submit_answer(category_name, word)
        except KeyError:
            raise HTTPException(status_code=400, detail=f"Category '{category_name}' is not part of this game.")
        if not accepted:
            raise HTTPException(status_code=409, detail="Inputs are locked, the round is over.")
    return _to_public(game)

@router.post("/{game_id}/stop", response_model=GameStatePublic)
async def stop_round(game_id: str):
    game = _get_game(game_id)
    summary = await finalize_round(game_id, RoundEndTrigger.MANUAL_STOP)
    if summary is None:
        raise HTTPException(status_code=409, detail="The round is already finished.")
    return _to_public(game)

@router.post("/{game_id}/next", response_model=GameStatePublic)
async def next_round(game_id: str, db: Session = Depends(deps.get_db)):
    game = _get_game(game_id)
    if not game.machine.proceed():
        raise HTTPException(status_code=409, detail=f"Cannot move on from state {game.machine.state.value}.")

    if game.machine.state == RoundState.RUNNING:
        _start_round_timer(game)
        return _to_public(game)

    if game.final_summary is not None and not game.stats_recorded:
        stats = crud_game_stats.record_game_result(db, game.final_summary.final_score)
        game.stats_recorded = True
        game.machine.set_game_summary(
            game.final_summary.model_copy(update={"high_score": stats.high_score, "games_played": stats.games_played})
        )
    # The final state goes out in this response; the game is not reachable afterwards
    active_games.pop(game_id, None)
    logger.info(f"G:{game_id} - Game over, removed from active games.")
    return _to_public(game)

@router.delete("/{game_id}", status_code=204)
async def abandon_game(game_id: str):
    game = _get_game(game_id)
    if game.countdown:
        game.countdown.cancel()
    if game.machine.abandon():
        logger.info(f"G:{game_id} - Abandoned by the player.")
    active_games.pop(game_id, None)
    return Response(status_code=204)
