"""
SonicVision API Dependencies
Request-scoped access to the services created at startup
"""

from fastapi import HTTPException, Request

from ..core.config import SonicVisionSettings
from ..database.storage import BaseStorage
from ..services.generation_service import GenerationService


def get_storage(request: Request) -> BaseStorage:
    return request.app.state.storage


def get_generation_service(request: Request) -> GenerationService:
    return request.app.state.generation_service


def ensure_prompt_allowed(prompt: str, settings: SonicVisionSettings) -> None:
    """Apply the configured prompt limit on top of the schema's hard cap"""
    if not settings.validate_prompt(prompt):
        raise HTTPException(
            status_code=422,
            detail=f"Prompt must be between 1 and {settings.MAX_PROMPT_LENGTH} characters"
        )
