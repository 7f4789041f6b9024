# app/services/categorization_engine.py
import logging
import threading
from typing import List

from app.core.config import settings
from app.models.category import CategoryPublic
from app.models.enums import ValidationStatus
from app.models.validation import ValidationResult
from app.services.validators.base import CategoryValidator

logger = logging.getLogger("app.services.categorization_engine")

FALLBACK_SOURCE = "resolver-fallback"

def _is_better(candidate: ValidationResult, best: ValidationResult | None) -> bool:
    """VALID beats everything else, UNCERTAIN beats INVALID, equal status goes to the higher confidence."""
    if best is None:
        return True
    if candidate.is_valid != best.is_valid:
        return candidate.is_valid
    if candidate.is_uncertain and best.is_invalid:
        return True
    if candidate.is_invalid and best.is_uncertain:
        return False
    return candidate.confidence > best.confidence

class CategorizationEngine:
    """
    Runs validators in order until one gives a confident VALID/INVALID verdict.

    Validators are isolated from each other: an unavailable one is skipped, one
    that raises or answers ERROR is logged and ignored. If nothing is confident the
    engine rejects the word, so callers never receive UNCERTAIN.
    """

    def __init__(
        self,
        validators: List[CategoryValidator] | None = None,
        confidence_threshold: float = settings.CONFIDENCE_THRESHOLD,
        fallback_confidence: float = settings.RESOLVER_FALLBACK_CONFIDENCE,
    ):
        self._lock = threading.Lock()
        self._validators: List[CategoryValidator] = [v for v in (validators or []) if v is not None]
        self.confidence_threshold = confidence_threshold
        self.fallback_confidence = fallback_confidence

    def add_validator(self, validator: CategoryValidator | None) -> None:
        if validator is None:
            return
        with self._lock:
            self._validators.append(validator)
        logger.info(f"Validator '{validator.source_name}' added to the pipeline")

    def remove_validator(self, source_name: str) -> int:
        """Removes every validator with this source name; returns how many were removed."""
        with self._lock:
            before = len(self._validators)
            self._validators = [v for v in self._validators if v.source_name != source_name]
            removed = before - len(self._validators)
        if removed:
            logger.info(f"Validator '{source_name}' removed from the pipeline")
        return removed

    @property
    def validators(self) -> List[CategoryValidator]:
        with self._lock:
            return list(self._validators)

    def available_validators(self) -> List[str]:
        return [v.source_name for v in self.validators if self._is_available(v)]

    def _is_available(self, validator: CategoryValidator) -> bool:
        try:
            return bool(validator.is_available())
        except Exception:
            logger.exception(f"Availability check failed for validator '{validator.source_name}'")
            return False

    def validate(self, word: str | None, category: CategoryPublic) -> ValidationResult:
        if word is None or not word.strip():
            return ValidationResult(status=ValidationStatus.INVALID, source="engine", details="Empty word")

        best: ValidationResult | None = None
        for validator in self.validators:
            if not self._is_available(validator):
                logger.debug(f"Skipping unavailable validator '{validator.source_name}'")
                continue

            try:
                result = validator.validate(word, category)
            except Exception:
                logger.exception(f"Validator '{validator.source_name}' failed on '{word}' ({category.name})")
                continue

            if result is None or result.has_error:
                logger.warning(
                    f"Validator '{validator.source_name}' returned no usable result for '{word}' ({category.name}): "
                    f"{result.details if result else 'None'}"
                )
                continue

            logger.debug(f"{validator.source_name}: {result.status.value} ({result.confidence:.2f}) for '{word}'")

            if _is_better(result, best):
                best = result

            if (result.is_valid or result.is_invalid) and result.is_confident(self.confidence_threshold):
                return result

        if best is not None and (best.is_valid or best.is_invalid):
            # Verdicts below the threshold are still definite, keep the strongest one
            return best

        details = "No validator reached a confident verdict"
        if best is not None and best.details:
            details += f" (best: {best.source} - {best.details})"
        logger.info(f"Falling back to INVALID for '{word}' ({category.name})")
        return ValidationResult(
            status=ValidationStatus.INVALID,
            confidence=self.fallback_confidence,
            source=FALLBACK_SOURCE,
            details=details,
        )
