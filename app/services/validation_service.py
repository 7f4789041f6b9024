# app/services/validation_service.py
import logging
from functools import lru_cache

from app.core.config import settings
from app.models.enums import ValidationStatus
from app.models.validation import PipelineInfo, ValidationResult
from app.services.categorization_engine import CategorizationEngine
from app.services.normalizer import normalize, normalize_category_name
from app.services.semantic_client import build_semantic_client
from app.services.stores import CategoryRepository, SqlCategoryRepository, SqlValidationCache, ValidationCache
from app.services.validators.cache_validator import CacheValidator
from app.services.validators.dictionary_validator import DictionaryValidator
from app.services.validators.fixed_list_validator import FixedListValidator
from app.services.validators.semantic_validator import SemanticValidator

logger = logging.getLogger("app.services.validation_service")

class ValidationService:
    """
    Entry point for validating a player's word against a category.

    Resolves the category, answers from the cache when the pair was already
    confirmed, otherwise runs the engine and remembers new VALID words.
    """

    def __init__(self, engine: CategorizationEngine, category_repository: CategoryRepository, cache: ValidationCache):
        self.engine = engine
        self._category_repository = category_repository
        self.cache = cache

    @property
    def category_repository(self) -> CategoryRepository:
        return self._category_repository

    def validate_word(self, category_name: str | None, word: str | None) -> ValidationResult:
        if word is None or not word.strip():
            return ValidationResult(status=ValidationStatus.INVALID, source="input", details="Empty word")

        internal_name = normalize_category_name(category_name)
        category = self._category_repository.find_by_name(internal_name) if internal_name else None
        if category is None:
            logger.error(f"Validation requested for unknown category '{category_name}'")
            return ValidationResult(
                status=ValidationStatus.ERROR,
                source="service",
                details=f"Unknown category: {category_name}",
            )

        normalized_word = normalize(word)
        if self.cache.has(normalized_word, category.name):
            return ValidationResult(
                status=ValidationStatus.VALID,
                confidence=1.0,
                source="cache",
                details="Previously validated",
            )

        result = self.engine.validate(normalized_word, category)

        if result.is_valid:
            try:
                self.cache.put(normalized_word, category.name)
            except Exception:
                logger.exception(f"Could not cache '{normalized_word}' for {category.name}")

        logger.info(f"'{normalized_word}' in {category.name}: {result.status.value} ({result.confidence:.2f}, {result.source})")
        return result

    def validate_word_boolean(self, category_name: str | None, word: str | None) -> bool:
        return self.validate_word(category_name, word).is_valid

    def validation_stats(self) -> PipelineInfo:
        return PipelineInfo(
            available_validators=self.engine.available_validators(),
            confidence_threshold=self.engine.confidence_threshold,
        )

def build_default_engine(cache: ValidationCache) -> CategorizationEngine:
    """Cache, word lists, semantic service, dictionary: cheapest and most reliable first."""
    engine = CategorizationEngine(confidence_threshold=settings.CONFIDENCE_THRESHOLD)
    engine.add_validator(CacheValidator(cache))
    engine.add_validator(FixedListValidator())
    client = build_semantic_client(settings)
    if client is not None:
        engine.add_validator(SemanticValidator(client, settings.SEMANTIC_CONFIDENCE_THRESHOLD))
    engine.add_validator(DictionaryValidator(enabled=settings.DICTIONARY_VALIDATION_ENABLED))
    return engine

@lru_cache()
def get_validation_service() -> ValidationService:
    cache = SqlValidationCache()
    service = ValidationService(build_default_engine(cache), SqlCategoryRepository(), cache)
    logger.info(f"Validation pipeline ready: {service.engine.available_validators()}")
    return service
