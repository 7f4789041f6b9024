# app/services/validators/semantic_validator.py
import logging

from app.core.config import settings
from app.models.category import CategoryPublic
from app.models.enums import ValidationStatus
from app.models.validation import ValidationResult
from app.services.normalizer import normalize
from app.services.semantic_client import SemanticClientError

logger = logging.getLogger("app.services.validators.semantic")

PROMPT_TEMPLATE = "Is '{word}' a valid example of the category '{category}'?"

class SemanticValidator:
    """Asks a remote semantic service (LLM or webhook) whether the word belongs to the category."""

    source_name = "remote-semantic"

    def __init__(self, client, confidence_threshold: float = settings.SEMANTIC_CONFIDENCE_THRESHOLD):
        self.client = client
        self.confidence_threshold = confidence_threshold

    def is_available(self) -> bool:
        return self.client is not None and self.client.is_healthy()

    def validate(self, word: str, category: CategoryPublic) -> ValidationResult:
        normalized = normalize(word)
        if not normalized:
            return ValidationResult(status=ValidationStatus.UNCERTAIN, source=self.source_name, details="Empty word")

        prompt = PROMPT_TEMPLATE.format(word=normalized, category=category.display_name or category.name)
        try:
            verdict = self.client.ask(prompt)
        except SemanticClientError as e:
            logger.warning(f"Semantic check failed for '{normalized}' in {category.name}: {e}")
            return ValidationResult(
                status=ValidationStatus.UNCERTAIN,
                source=self.source_name,
                details=f"Semantic service error ({e.error_type.value}): {e.args[0]}",
            )

        if verdict.confidence >= self.confidence_threshold:
            status = ValidationStatus.VALID if verdict.valid else ValidationStatus.INVALID
            details = f"Semantic verdict: {'valid' if verdict.valid else 'invalid'}"
        else:
            status = ValidationStatus.UNCERTAIN
            details = f"Low confidence semantic verdict ({verdict.confidence:.2f})"
        if verdict.reasoning:
            details += f" - {verdict.reasoning}"

        logger.debug(f"Semantic result for '{normalized}' in {category.name}: {status.value} ({verdict.confidence:.2f})")
        return ValidationResult(status=status, confidence=verdict.confidence, source=self.source_name, details=details)
