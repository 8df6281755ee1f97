"""
SonicVision Music API Routes
Submit, list and track music generations
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Query

from ...core.config import SonicVisionSettings, get_settings
from ...core.constants import GenerationStatus
from ...database.schemas import MusicGenerationCreate, MusicGenerationResponse
from ...database.storage import BaseStorage
from ...services.generation_service import GenerationService
from ..dependencies import ensure_prompt_allowed, get_generation_service, get_storage

router = APIRouter()


@router.post("/generate", response_model=MusicGenerationResponse, status_code=201)
async def generate_music(
    body: MusicGenerationCreate,
    background_tasks: BackgroundTasks,
    user_id: Optional[str] = Query(None),
    service: GenerationService = Depends(get_generation_service),
    settings: SonicVisionSettings = Depends(get_settings)
):
    """Create a music generation; the provider is polled in the background"""
    ensure_prompt_allowed(body.prompt, settings)

    result = await service.submit_music(body, user_id=user_id)
    if result.is_err():
        raise HTTPException(status_code=502, detail=result.error)

    record = result.data
    if record.status == GenerationStatus.PROCESSING.value:
        background_tasks.add_task(service.poll_music, record.id)

    return record


@router.get("", response_model=List[MusicGenerationResponse])
async def list_music(
    user_id: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=200),
    storage: BaseStorage = Depends(get_storage),
    settings: SonicVisionSettings = Depends(get_settings)
):
    """Newest-first music generations"""
    return await storage.get_user_music_generations(
        user_id=user_id,
        limit=limit or settings.DEFAULT_LIST_LIMIT
    )


@router.post("/callback")
async def provider_callback(
    payload: Dict[str, Any] = Body(...),
    service: GenerationService = Depends(get_generation_service)
) -> Dict[str, Any]:
    """Provider completion callback; triggers a status refresh for the task"""
    data = payload.get("data") or {}
    task_id = data.get("task_id") or data.get("taskId")
    if not task_id:
        raise HTTPException(status_code=400, detail="Callback payload has no task id")

    result = await service.handle_callback(task_id)
    return {"received": True, "updated": result.is_ok()}


@router.get("/{generation_id}", response_model=MusicGenerationResponse)
async def get_music(generation_id: str, storage: BaseStorage = Depends(get_storage)):
    record = await storage.get_music_generation(generation_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Music generation {generation_id} not found")
    return record


@router.post("/{generation_id}/refresh", response_model=MusicGenerationResponse)
async def refresh_music(
    generation_id: str,
    storage: BaseStorage = Depends(get_storage),
    service: GenerationService = Depends(get_generation_service)
):
    """Query the provider once for a pending or processing generation"""
    if await storage.get_music_generation(generation_id) is None:
        raise HTTPException(status_code=404, detail=f"Music generation {generation_id} not found")

    result = await service.refresh_music(generation_id)
    if result.is_err():
        raise HTTPException(status_code=502, detail=result.error)
    return result.data
