"""
SonicVision Images API Routes
Submit, list and download image generations
"""

from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from ...core.config import SonicVisionSettings, get_settings
from ...database.schemas import ImageGenerationCreate, ImageGenerationResponse
from ...database.storage import BaseStorage
from ...player.gallery import DEFAULT_IMAGE_FILENAME, download_filename, is_displayable
from ...services.generation_service import GenerationService
from ..dependencies import ensure_prompt_allowed, get_generation_service, get_storage

router = APIRouter()


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and the RFC 5987 UTF-8 name"""
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or f"{DEFAULT_IMAGE_FILENAME}.png"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.post("/generate", response_model=ImageGenerationResponse, status_code=201)
async def generate_image(
    body: ImageGenerationCreate,
    user_id: Optional[str] = Query(None),
    storage: BaseStorage = Depends(get_storage),
    service: GenerationService = Depends(get_generation_service),
    settings: SonicVisionSettings = Depends(get_settings)
):
    """Generate an image, optionally paired with a music generation"""
    ensure_prompt_allowed(body.prompt, settings)

    if body.music_generation_id and await storage.get_music_generation(body.music_generation_id) is None:
        raise HTTPException(
            status_code=404,
            detail=f"Music generation {body.music_generation_id} not found"
        )

    result = await service.submit_image(body, user_id=user_id)
    if result.is_err():
        raise HTTPException(status_code=502, detail=result.error)
    return result.data


@router.get("", response_model=List[ImageGenerationResponse])
async def list_images(
    user_id: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=200),
    storage: BaseStorage = Depends(get_storage),
    settings: SonicVisionSettings = Depends(get_settings)
):
    """Newest-first image generations"""
    return await storage.get_user_image_generations(
        user_id=user_id,
        limit=limit or settings.DEFAULT_LIST_LIMIT
    )


@router.get("/{image_id}", response_model=ImageGenerationResponse)
async def get_image(image_id: str, storage: BaseStorage = Depends(get_storage)):
    record = await storage.get_image_generation(image_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Image generation {image_id} not found")
    return record


@router.get("/{image_id}/download")
async def download_image(
    image_id: str,
    storage: BaseStorage = Depends(get_storage),
    service: GenerationService = Depends(get_generation_service)
):
    """Binary image content as an attachment"""
    record = await storage.get_image_generation(image_id)
    if record is None or not is_displayable(record):
        raise HTTPException(status_code=404, detail=f"Image {image_id} not available")

    result = await service.fetch_image(record)
    if result.is_err():
        raise HTTPException(status_code=502, detail=result.error)

    payload = result.data
    return Response(
        content=payload.content,
        media_type=payload.content_type,
        headers={"Content-Disposition": _content_disposition(download_filename(record))}
    )
