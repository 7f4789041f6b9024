# app/models/validation.py
import math
from pydantic import BaseModel, ConfigDict, field_validator

from app.models.enums import ValidationStatus

class ValidationResult(BaseModel):
    """Immutable verdict for one (word, category) pair."""
    model_config = ConfigDict(frozen=True)

    status: ValidationStatus
    confidence: float = 0.0 # Always clamped to [0.0, 1.0]
    source: str = "unknown" # Which validator/resolver produced it
    details: str = ""

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value) -> float:
        value = float(value)
        if math.isnan(value):
            return 0.0
        return max(0.0, min(1.0, value))

    @field_validator("source", "details", mode="before")
    @classmethod
    def none_to_default(cls, value, info):
        if value is None:
            return "unknown" if info.field_name == "source" else ""
        return value

    @property
    def is_valid(self) -> bool:
        return self.status == ValidationStatus.VALID

    @property
    def is_invalid(self) -> bool:
        return self.status == ValidationStatus.INVALID

    @property
    def is_uncertain(self) -> bool:
        return self.status == ValidationStatus.UNCERTAIN

    @property
    def has_error(self) -> bool:
        return self.status == ValidationStatus.ERROR

    def is_confident(self, threshold: float) -> bool:
        return self.confidence >= threshold

class WordValidationRequest(BaseModel):
    category: str
    word: str | None = None

class PipelineInfo(BaseModel):
    available_validators: list[str]
    confidence_threshold: float
