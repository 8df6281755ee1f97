"""
SonicVision API Client
Async HTTP client used by the player and gallery to read generation records
"""

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import httpx
import structlog

from .core.config import get_settings
from .core.constants import MAX_POLL_ATTEMPTS, POLLING_INTERVAL, GenerationStatus
from .database.schemas import (
    ImageGenerationCreate,
    ImageGenerationResponse,
    MusicGenerationCreate,
    MusicGenerationResponse,
)
from .player.gallery import Clipboard, GalleryActions, ShareSheet

logger = structlog.get_logger("sonicvision.client")


class GenerationTimeoutError(Exception):
    """A generation did not settle within the polling budget"""
    pass


class SonicVisionClient:
    """Thin async wrapper over the SonicVision REST API"""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        polling_interval: float = POLLING_INTERVAL,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport
        )
        self.polling_interval = polling_interval
        self._sleep = sleep

    async def __aenter__(self) -> "SonicVisionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # Music
    async def generate_music(self, request: MusicGenerationCreate) -> MusicGenerationResponse:
        response = await self._client.post(
            "/api/music/generate",
            json=request.model_dump(mode="json")
        )
        response.raise_for_status()
        return MusicGenerationResponse.model_validate(response.json())

    async def get_music(self, generation_id: str) -> Optional[MusicGenerationResponse]:
        """Fetch one record; None when the server reports 404"""
        response = await self._client.get(f"/api/music/{generation_id}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return MusicGenerationResponse.model_validate(response.json())

    async def list_music(
        self,
        user_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[MusicGenerationResponse]:
        response = await self._client.get("/api/music", params=self._list_params(user_id, limit))
        response.raise_for_status()
        return [MusicGenerationResponse.model_validate(item) for item in response.json()]

    async def wait_for_music(
        self,
        generation_id: str,
        max_attempts: int = MAX_POLL_ATTEMPTS
    ) -> MusicGenerationResponse:
        """Re-read a record at a fixed interval until it completes or fails"""
        for attempt in range(max_attempts):
            record = await self.get_music(generation_id)
            if record is None:
                raise LookupError(f"Music generation {generation_id} not found")

            if GenerationStatus(record.status).is_terminal:
                return record

            logger.debug(
                "Waiting for music generation",
                generation_id=generation_id,
                status=record.status,
                attempt=attempt + 1
            )
            await self._sleep(self.polling_interval)

        raise GenerationTimeoutError(
            f"Music generation {generation_id} not settled after {max_attempts} checks"
        )

    # Images
    async def generate_image(self, request: ImageGenerationCreate) -> ImageGenerationResponse:
        response = await self._client.post(
            "/api/images/generate",
            json=request.model_dump(mode="json")
        )
        response.raise_for_status()
        return ImageGenerationResponse.model_validate(response.json())

    async def list_images(
        self,
        user_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[ImageGenerationResponse]:
        response = await self._client.get("/api/images", params=self._list_params(user_id, limit))
        response.raise_for_status()
        return [ImageGenerationResponse.model_validate(item) for item in response.json()]

    async def download_image(self, image_id: str) -> bytes:
        """Raw bytes from the download endpoint; raises httpx.HTTPStatusError on failure"""
        response = await self._client.get(f"/api/images/{image_id}/download")
        response.raise_for_status()
        return response.content

    @staticmethod
    def _list_params(user_id: Optional[str], limit: Optional[int]) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if user_id:
            params["user_id"] = user_id
        if limit is not None:
            params["limit"] = limit
        return params

    def gallery_actions(
        self,
        downloads_dir: Optional[Union[str, Path]] = None,
        share_sheet: Optional[ShareSheet] = None,
        clipboard: Optional[Clipboard] = None
    ) -> GalleryActions:
        """Gallery download/share actions backed by this client"""
        return GalleryActions(
            downloader=self,
            downloads_dir=downloads_dir or get_settings().DOWNLOADS_PATH,
            share_sheet=share_sheet,
            clipboard=clipboard
        )
