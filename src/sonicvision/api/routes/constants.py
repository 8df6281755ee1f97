"""
SonicVision Constants API Routes
Genre, model and tag tables for the generation form
"""

from typing import Any, Dict

from fastapi import APIRouter

from ...core.config import get_settings
from ...core.constants import GENERATION_STATUS, MUSIC_GENRES, MUSIC_MODELS, QUICK_TAGS

router = APIRouter()


@router.get("")
async def get_constants() -> Dict[str, Any]:
    """Lookup tables and client polling parameters"""
    settings = get_settings()
    return {
        "genres": MUSIC_GENRES,
        "models": MUSIC_MODELS,
        "quick_tags": QUICK_TAGS,
        "generation_status": GENERATION_STATUS,
        "polling_interval_ms": int(settings.POLLING_INTERVAL * 1000),
        "max_prompt_length": settings.MAX_PROMPT_LENGTH,
    }
