# app/services/validators/base.py
from typing import Protocol, runtime_checkable

from app.models.category import CategoryPublic
from app.models.validation import ValidationResult

@runtime_checkable
class CategoryValidator(Protocol):
    """
    Capability shared by every validation strategy.

    A strategy never raises for word-quality or network problems: it answers
    UNCERTAIN to defer the decision to the next strategy in the pipeline, and
    reports is_available() == False when it cannot be used at all.
    """

    @property
    def source_name(self) -> str: ...

    def is_available(self) -> bool: ...

    def validate(self, word: str, category: CategoryPublic) -> ValidationResult: ...
