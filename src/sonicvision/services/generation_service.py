"""
SonicVision Generation Service
Orchestrates music and image generation from request to stored result
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import structlog

from ..core.constants import MAX_POLL_ATTEMPTS, POLLING_INTERVAL, GenerationStatus
from ..core.logging import generation_logger
from ..core.result import Result
from ..database.models import ImageGeneration, MusicGeneration, utcnow
from ..database.schemas import ImageGenerationCreate, MusicGenerationCreate
from ..database.storage import BaseStorage
from .image_provider import ImagePayload, ImageProvider
from .suno_provider import SunoProvider

logger = structlog.get_logger("sonicvision.generation")

IMAGE_PROMPT_LIMIT = 1000


class GenerationService:
    """
    Drives generation records through pending -> processing -> completed|failed.

    Provider failures never raise; they are written to the record as a failed
    status with an error message. Status reports that would move a record
    backwards are ignored.
    """

    def __init__(
        self,
        storage: BaseStorage,
        music_provider: SunoProvider,
        image_provider: ImageProvider,
        polling_interval: float = POLLING_INTERVAL,
        max_poll_attempts: int = MAX_POLL_ATTEMPTS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        self.storage = storage
        self.music_provider = music_provider
        self.image_provider = image_provider
        self.polling_interval = polling_interval
        self.max_poll_attempts = max_poll_attempts
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Music
    # ------------------------------------------------------------------
    async def submit_music(
        self,
        request: MusicGenerationCreate,
        user_id: Optional[str] = None
    ) -> Result[MusicGeneration]:
        """Persist a pending record and hand it to the music provider"""
        record = await self.storage.create_music_generation(request, user_id=user_id)
        generation_logger.log_submitted(
            kind="music",
            generation_id=record.id,
            prompt=request.prompt,
            model=request.model,
            instrumental=request.instrumental
        )

        init = await self.music_provider.initialize()
        if init.is_err():
            return Result.ok(await self._fail_music(record, init.error))

        submitted = await self.music_provider.submit(
            prompt=request.prompt,
            model=request.model,
            style=request.style,
            title=request.title,
            instrumental=request.instrumental
        )
        if submitted.is_err():
            return Result.ok(await self._fail_music(record, submitted.error))

        record = await self._transition_music(
            record,
            GenerationStatus.PROCESSING,
            task_id=submitted.data
        )

        if request.generate_image:
            await self.submit_image(
                ImageGenerationCreate(
                    prompt=self.build_image_prompt(request),
                    title=request.title,
                    music_generation_id=record.id
                ),
                user_id=user_id
            )

        return Result.ok(record)

    async def refresh_music(self, generation_id: str) -> Result[MusicGeneration]:
        """Query the provider once and apply whatever it reports"""
        record = await self.storage.get_music_generation(generation_id)
        if record is None:
            return Result.err(f"Music generation {generation_id} not found")

        if GenerationStatus(record.status).is_terminal or not record.task_id:
            return Result.ok(record)

        init = await self.music_provider.initialize()
        if init.is_err():
            return Result.err(init.error)

        status_result = await self.music_provider.get_status(record.task_id)
        if status_result.is_err():
            logger.warning(
                "Provider status check failed",
                generation_id=generation_id,
                error=status_result.error
            )
            return Result.err(status_result.error)

        task = status_result.data
        if task.status == GenerationStatus.COMPLETED:
            record = await self._transition_music(
                record,
                GenerationStatus.COMPLETED,
                audio_url=task.audio_url,
                image_url=task.image_url or record.image_url,
                title=record.title or task.title,
                duration=task.duration or record.duration,
                generation_metadata={"provider_status": task.provider_status}
            )
        elif task.status == GenerationStatus.FAILED:
            record = await self._fail_music(record, task.error or "Generation failed")
        elif GenerationStatus(record.status) != task.status:
            record = await self._transition_music(record, task.status)

        return Result.ok(record)

    async def poll_music(self, generation_id: str) -> Result[MusicGeneration]:
        """Refresh at a fixed interval until the record settles or attempts run out"""
        for attempt in range(self.max_poll_attempts):
            result = await self.refresh_music(generation_id)

            if result.is_ok() and GenerationStatus(result.data.status).is_terminal:
                return result

            if result.is_err() and await self.storage.get_music_generation(generation_id) is None:
                return result

            await self._sleep(self.polling_interval)

        record = await self.storage.get_music_generation(generation_id)
        if record is None:
            return Result.err(f"Music generation {generation_id} not found")

        return Result.ok(await self._fail_music(
            record,
            f"Generation timed out after {self.max_poll_attempts} status checks"
        ))

    async def handle_callback(self, task_id: str) -> Result[MusicGeneration]:
        """Provider callback: re-query the task rather than trusting the payload"""
        record = await self.storage.get_music_generation_by_task_id(task_id)
        if record is None:
            return Result.err(f"No music generation for task {task_id}")
        return await self.refresh_music(record.id)

    @staticmethod
    def build_image_prompt(request: MusicGenerationCreate) -> str:
        """Prompt for the cover image paired with a music request"""
        style = f" {request.style}" if request.style else ""
        prompt = f"Album cover artwork for a{style} song. {request.prompt}"
        return prompt[:IMAGE_PROMPT_LIMIT]

    async def _fail_music(self, record: MusicGeneration, error: str) -> MusicGeneration:
        generation_logger.log_failure(kind="music", generation_id=record.id, error=error)
        return await self._transition_music(
            record,
            GenerationStatus.FAILED,
            error_message=error
        )

    async def _transition_music(
        self,
        record: MusicGeneration,
        target: GenerationStatus,
        **fields: Any
    ) -> MusicGeneration:
        updates = self._transition_updates(record, target, "music", fields)
        if updates is None:
            return record

        updated = await self.storage.update_music_generation(record.id, updates)
        return updated or record

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    async def submit_image(
        self,
        request: ImageGenerationCreate,
        user_id: Optional[str] = None
    ) -> Result[ImageGeneration]:
        """Generate an image; the provider answers synchronously with a URL"""
        record = await self.storage.create_image_generation(request, user_id=user_id)
        generation_logger.log_submitted(
            kind="image",
            generation_id=record.id,
            prompt=request.prompt,
            music_generation_id=request.music_generation_id
        )

        init = await self.image_provider.initialize()
        if init.is_err():
            return Result.ok(await self._fail_image(record, init.error))

        record = await self._transition_image(record, GenerationStatus.PROCESSING)

        generated = await self.image_provider.generate(request.prompt)
        if generated.is_err():
            return Result.ok(await self._fail_image(record, generated.error))

        record = await self._transition_image(
            record,
            GenerationStatus.COMPLETED,
            image_url=generated.data
        )
        return Result.ok(record)

    async def fetch_image(self, record: ImageGeneration) -> Result[ImagePayload]:
        """Download the stored image for a completed record"""
        if not record.image_url:
            return Result.err(f"Image generation {record.id} has no image")

        init = await self.image_provider.initialize()
        if init.is_err():
            return Result.err(init.error)

        return await self.image_provider.fetch(record.image_url)

    async def _fail_image(self, record: ImageGeneration, error: str) -> ImageGeneration:
        generation_logger.log_failure(kind="image", generation_id=record.id, error=error)
        return await self._transition_image(
            record,
            GenerationStatus.FAILED,
            error_message=error
        )

    async def _transition_image(
        self,
        record: ImageGeneration,
        target: GenerationStatus,
        **fields: Any
    ) -> ImageGeneration:
        updates = self._transition_updates(record, target, "image", fields)
        if updates is None:
            return record

        updated = await self.storage.update_image_generation(record.id, updates)
        return updated or record

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------
    def _transition_updates(
        self,
        record: Any,
        target: GenerationStatus,
        kind: str,
        fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Build the update for a forward transition; None when it would regress"""
        current = GenerationStatus(record.status)
        if not current.can_transition_to(target):
            generation_logger.log_status_regression(
                kind=kind,
                generation_id=record.id,
                current_status=current.value,
                reported_status=target.value
            )
            return None

        updates = {"status": target.value, **fields}
        if target.is_terminal:
            updates["completed_at"] = utcnow()

        generation_logger.log_status_change(
            kind=kind,
            generation_id=record.id,
            old_status=current.value,
            new_status=target.value
        )
        return updates

    async def close(self) -> None:
        await self.music_provider.cleanup()
        await self.image_provider.cleanup()
