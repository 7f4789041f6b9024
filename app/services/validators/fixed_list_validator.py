# app/services/validators/fixed_list_validator.py
import logging
import threading
from typing import Dict, Iterable, Set

from app.models.category import CategoryPublic
from app.models.enums import ValidationStatus
from app.models.validation import ValidationResult
from app.services.normalizer import normalize, normalize_category_name
from app.services.validators.word_lists import DEFAULT_WORD_LISTS

logger = logging.getLogger("app.services.validators.fixed_list")

class FixedListValidator:
    """
    Offline lookup in curated per-category word lists.
    A match is definitive; a miss defers to the next validator.
    """

    source_name = "deterministic-list"

    def __init__(self, word_lists: Dict[str, Iterable[str]] | None = None):
        source = DEFAULT_WORD_LISTS if word_lists is None else word_lists
        self._lock = threading.Lock()
        self._words: Dict[str, Set[str]] = {
            normalize_category_name(name): {normalize(w) for w in words if normalize(w)}
            for name, words in source.items()
        }

    def is_available(self) -> bool:
        return True

    def supported_categories(self) -> list[str]:
        with self._lock:
            return sorted(self._words)

    def add_word(self, category_name: str, word: str) -> bool:
        """Adds a word at runtime. Returns False for blank input or a word already listed."""
        key = normalize_category_name(category_name)
        normalized = normalize(word)
        if not key or not normalized:
            return False
        with self._lock:
            words = self._words.setdefault(key, set())
            if normalized in words:
                return False
            words.add(normalized)
        logger.info(f"Added '{normalized}' to the {key} word list")
        return True

    def validate(self, word: str, category: CategoryPublic) -> ValidationResult:
        normalized = normalize(word)
        if not normalized:
            return ValidationResult(status=ValidationStatus.UNCERTAIN, source=self.source_name, details="Empty word")

        with self._lock:
            words = self._words.get(category.name)
            found = words is not None and normalized in words

        if words is None:
            return ValidationResult(
                status=ValidationStatus.UNCERTAIN,
                source=self.source_name,
                details=f"No word list for category {category.name}",
            )
        if found:
            return ValidationResult(
                status=ValidationStatus.VALID,
                confidence=1.0,
                source=self.source_name,
                details="Found in word list",
            )
        return ValidationResult(status=ValidationStatus.UNCERTAIN, source=self.source_name, details="Not found in word list")
