# app/api/validation.py
import asyncio
import logging
from fastapi import APIRouter, Depends

from app.api import deps
from app.models.validation import PipelineInfo, ValidationResult, WordValidationRequest
from app.services.validation_service import ValidationService

logger = logging.getLogger("app.api.validation")  # Logger for this module
router = APIRouter()

@router.post("/validate", response_model=ValidationResult)
async def validate_word(
    request: WordValidationRequest,
    service: ValidationService = Depends(deps.get_validation_service),
):
    """
    Validates one word outside of a game round. Unknown categories come back as
    an ERROR result rather than an HTTP error, the same way the game scores them.
    """
    # Remote validators block for several seconds at worst, keep them off the event loop
    return await asyncio.to_thread(service.validate_word, request.category, request.word)

@router.get("/pipeline", response_model=PipelineInfo)
def get_pipeline(service: ValidationService = Depends(deps.get_validation_service)):
    return service.validation_stats()
