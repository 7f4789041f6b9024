# app/services/round_service.py
import logging
import random
import string
import threading
from typing import Callable, Dict, List, Set

from app.models.category import CategoryPublic
from app.models.enums import RoundEndTrigger, RoundState, ValidationStatus
from app.models.game import CategoryOutcome, GameConfig, GameSummary, RoundSummary
from app.models.validation import ValidationResult
from app.services.normalizer import normalize, normalize_category_name, starts_with_letter

logger = logging.getLogger("app.services.round_service")

POINTS_PER_VALID_WORD = 1

# Every legal move of the round lifecycle; anything else is refused
ROUND_TRANSITIONS: Dict[RoundState, Set[RoundState]] = {
    RoundState.INIT: {RoundState.RUNNING},
    RoundState.RUNNING: {RoundState.FINISHED, RoundState.INIT},
    RoundState.FINISHED: {RoundState.DIALOG_SHOWN},
    RoundState.DIALOG_SHOWN: {RoundState.TRANSITIONING},
    RoundState.TRANSITIONING: {RoundState.RUNNING, RoundState.INIT},
}

RATINGS = [
    (80, "Excellent"),
    (60, "Very good"),
    (40, "Not bad"),
]

def playable_letters(excluded_letters: str = "") -> List[str]:
    excluded = set(excluded_letters.upper())
    allowed = [c for c in string.ascii_uppercase if c not in excluded]
    if not allowed:
        raise ValueError(f"No letters left to play once '{excluded_letters}' are excluded")
    return allowed

def pick_letter(used_letters: Set[str], excluded_letters: str = "", rng: random.Random | None = None) -> str:
    """Random round letter, never one already used in this game while unused letters remain."""
    rng = rng or random
    allowed = playable_letters(excluded_letters)
    fresh = [c for c in allowed if c not in used_letters]
    return rng.choice(fresh or allowed)

def rating_for(score: int, max_possible_score: int) -> str:
    if max_possible_score <= 0:
        return "Keep practicing"
    percentage = score / max_possible_score * 100
    for threshold, label in RATINGS:
        if percentage >= threshold:
            return label
    return "Keep practicing"

class RoundStateMachine:
    """
    Lifecycle of one solo game, round after round.

    INIT -> RUNNING -> FINISHED -> DIALOG_SHOWN -> TRANSITIONING -> RUNNING ... -> INIT

    Every move is a compare-and-set under a single lock, so when the timer and a
    manual stop race for RUNNING -> FINISHED only the winner scores the round; the
    loser gets None back. Scoring itself runs outside the lock, once, over the
    categories in order so duplicate detection sees a consistent accepted set.

    `validation_service` is anything with validate_word(category_name, word).
    `on_results(RoundSummary)` fires once per round from present_results(),
    `on_game_over(GameSummary)` fires once when the last round is left.
    """

    def __init__(
        self,
        config: GameConfig,
        validation_service,
        on_results: Callable[[RoundSummary], None] | None = None,
        on_game_over: Callable[[GameSummary], None] | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config
        self.validation_service = validation_service
        self.on_results = on_results
        self.on_game_over = on_game_over
        self._rng = rng or random.Random()
        self._lock = threading.Lock()

        self._state = RoundState.INIT
        self._round_number = 0
        self._letter: str | None = None
        self._used_letters: Set[str] = set()
        self._submissions: Dict[str, str] = {}
        self._accepted_words: Set[str] = set()
        self._score = 0
        self._scored_round = 0
        self._results_shown = False
        self._last_summary: RoundSummary | None = None
        self._game_over = False
        self._game_summary: GameSummary | None = None
        # Fails fast when every letter is excluded
        playable_letters(config.excluded_letters)

    # --- Read-only views ---

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def letter(self) -> str | None:
        return self._letter

    @property
    def round_number(self) -> int:
        return self._round_number

    @property
    def total_rounds(self) -> int:
        return self.config.number_of_rounds

    @property
    def score(self) -> int:
        return self._score

    @property
    def categories(self) -> List[CategoryPublic]:
        return list(self.config.categories)

    @property
    def submissions(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._submissions)

    @property
    def accepted_words(self) -> Set[str]:
        with self._lock:
            return set(self._accepted_words)

    @property
    def used_letters(self) -> Set[str]:
        with self._lock:
            return set(self._used_letters)

    @property
    def inputs_locked(self) -> bool:
        return self._state != RoundState.RUNNING

    @property
    def last_summary(self) -> RoundSummary | None:
        return self._last_summary

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def game_summary(self) -> GameSummary | None:
        return self._game_summary

    # --- Transitions ---

    def _transition(self, expected: RoundState, target: RoundState) -> bool:
        """Compare-and-set; the caller must hold the lock."""
        if self._state != expected or target not in ROUND_TRANSITIONS[expected]:
            return False
        logger.debug(f"Round {self._round_number}: {expected.value} -> {target.value}")
        self._state = target
        return True

    def _begin_round(self, expected: RoundState) -> bool:
        if not self._transition(expected, RoundState.RUNNING):
            return False
        self._round_number += 1
        self._letter = pick_letter(self._used_letters, self.config.excluded_letters, self._rng)
        self._used_letters.add(self._letter)
        self._submissions = {}
        self._accepted_words = set()
        self._results_shown = False
        logger.info(f"Round {self._round_number}/{self.total_rounds} started with letter {self._letter}")
        return True

    def start_round(self) -> bool:
        """INIT -> RUNNING for the first round. False once the game is over."""
        with self._lock:
            if self._game_over:
                return False
            return self._begin_round(RoundState.INIT)

    def submit_answer(self, category_name: str, word: str | None) -> bool:
        """Records the player's word; False once inputs are locked. Unknown categories raise KeyError."""
        key = normalize_category_name(category_name)
        if key not in {c.name for c in self.config.categories}:
            raise KeyError(category_name)
        with self._lock:
            if self._state != RoundState.RUNNING:
                return False
            self._submissions[key] = word or ""
            return True

    def finish_round(self, trigger: RoundEndTrigger) -> RoundSummary | None:
        """
        RUNNING -> FINISHED, then scores the round. Only the first caller scores;
        any later or concurrent caller gets None and changes nothing.
        """
        with self._lock:
            if not self._transition(RoundState.RUNNING, RoundState.FINISHED):
                logger.debug(f"Round {self._round_number}: {trigger.value} ignored in state {self._state.value}")
                return None
            round_number = self._round_number
            letter = self._letter
            submissions = dict(self._submissions)

        logger.info(f"Round {round_number} finished by {trigger.value}, scoring {len(self.config.categories)} categories")
        outcomes, accepted = self._score_submissions(letter, submissions)
        points = sum(o.points for o in outcomes)

        with self._lock:
            self._accepted_words = accepted
            self._score += points
            summary = RoundSummary(
                round_number=round_number,
                total_rounds=self.total_rounds,
                letter=letter,
                trigger=trigger,
                outcomes=outcomes,
                points=points,
                total_score=self._score,
            )
            self._last_summary = summary
            self._scored_round = round_number

        logger.info(f"Round {round_number} scored: +{points} (total {summary.total_score})")
        return summary

    def present_results(self) -> bool:
        """FINISHED -> DIALOG_SHOWN once scoring is done; calls on_results exactly once per round."""
        with self._lock:
            if self._results_shown or self._scored_round != self._round_number:
                return False
            if not self._transition(RoundState.FINISHED, RoundState.DIALOG_SHOWN):
                return False
            self._results_shown = True
            summary = self._last_summary

        if self.on_results is not None:
            self.on_results(summary)
        return True

    def proceed(self) -> bool:
        """DIALOG_SHOWN -> TRANSITIONING, then the next round or the end of the game."""
        with self._lock:
            if not self._transition(RoundState.DIALOG_SHOWN, RoundState.TRANSITIONING):
                return False
            if self._round_number < self.total_rounds:
                return self._begin_round(RoundState.TRANSITIONING)

            self._transition(RoundState.TRANSITIONING, RoundState.INIT)
            self._game_over = True
            self._letter = None
            game_summary = self._build_game_summary()
            self._game_summary = game_summary

        logger.info(f"Game over: {game_summary.final_score}/{game_summary.max_possible_score} ({game_summary.rating})")
        if self.on_game_over is not None:
            self.on_game_over(game_summary)
        return True

    def abandon(self) -> bool:
        """RUNNING -> INIT without scoring. Validations already running may still write to the cache."""
        with self._lock:
            if not self._transition(RoundState.RUNNING, RoundState.INIT):
                return False
            self._game_over = True
            self._letter = None
            self._submissions = {}
        logger.info(f"Game abandoned during round {self._round_number}")
        return True

    def set_game_summary(self, summary: GameSummary) -> None:
        """Lets the game-over collaborator attach enriched results (e.g. high score)."""
        with self._lock:
            self._game_summary = summary

    # --- Scoring ---

    def _score_submissions(self, letter: str, submissions: Dict[str, str]):
        accepted: Set[str] = set()
        outcomes: List[CategoryOutcome] = []
        for category in self.config.categories:
            word = submissions.get(category.name, "")
            result = self._judge_word(category, word, letter, accepted)
            if result.is_valid:
                accepted.add(normalize(word))
            elif result.has_error:
                logger.error(f"Scoring error for '{word}' in {category.name}: {result.details}")
            points = POINTS_PER_VALID_WORD if result.is_valid else 0
            outcomes.append(CategoryOutcome(category=category.name, word=word, result=result, points=points))
        return outcomes, accepted

    def _judge_word(self, category: CategoryPublic, word: str, letter: str, accepted: Set[str]) -> ValidationResult:
        normalized = normalize(word)
        if not normalized:
            return ValidationResult(status=ValidationStatus.INVALID, source="input", details="No answer")
        if not starts_with_letter(normalized, letter):
            return ValidationResult(
                status=ValidationStatus.INVALID,
                source="round-rules",
                details=f"Word must start with '{letter}'",
            )
        if normalized in accepted:
            return ValidationResult(
                status=ValidationStatus.INVALID,
                source="round-rules",
                details="Duplicate word in this round",
            )
        try:
            return self.validation_service.validate_word(category.name, normalized)
        except Exception as e:
            logger.exception(f"Validation failed for '{normalized}' in {category.name}")
            return ValidationResult(status=ValidationStatus.ERROR, source="service", details=f"Validation failed: {e}")

    def _build_game_summary(self) -> GameSummary:
        max_possible = self._round_number * len(self.config.categories) * POINTS_PER_VALID_WORD
        return GameSummary(
            rounds_played=self._round_number,
            final_score=self._score,
            max_possible_score=max_possible,
            rating=rating_for(self._score, max_possible),
        )
