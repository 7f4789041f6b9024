# app/services/validators/cache_validator.py
import logging

from app.core.config import settings
from app.models.category import CategoryPublic
from app.models.enums import ValidationStatus
from app.models.validation import ValidationResult
from app.services.normalizer import normalize
from app.services.stores import ValidationCache

logger = logging.getLogger("app.services.validators.cache")

class CacheValidator:
    """Answers from words already confirmed in earlier games. A miss is never evidence of invalidity."""

    source_name = "cache"

    def __init__(self, cache: ValidationCache, hit_confidence: float = settings.CACHE_HIT_CONFIDENCE):
        self.cache = cache
        self.hit_confidence = hit_confidence

    def is_available(self) -> bool:
        return self.cache is not None

    def validate(self, word: str, category: CategoryPublic) -> ValidationResult:
        normalized = normalize(word)
        if not normalized:
            return ValidationResult(status=ValidationStatus.UNCERTAIN, source=self.source_name, details="Empty word")

        # Read failures propagate, the engine treats them as a strategy fault
        if self.cache.has(normalized, category.name):
            logger.debug(f"Cache hit for '{normalized}' in {category.name}")
            return ValidationResult(
                status=ValidationStatus.VALID,
                confidence=self.hit_confidence,
                source=self.source_name,
                details="Previously validated",
            )
        return ValidationResult(status=ValidationStatus.UNCERTAIN, source=self.source_name, details="Not in cache")
