"""
SonicVision Storage
Session-scoped facade over the repositories; one commit per operation
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_MUSIC_MODEL, GenerationStatus
from .models import ImageGeneration, MusicGeneration, User
from .repositories import (
    ImageGenerationRepository,
    MusicGenerationRepository,
    UserRepository,
)
from .schemas import (
    ImageGenerationCreate,
    ImageGenerationUpdate,
    MusicGenerationCreate,
    MusicGenerationUpdate,
    UserCreate,
)

MusicUpdates = Union[MusicGenerationUpdate, Mapping[str, Any]]
ImageUpdates = Union[ImageGenerationUpdate, Mapping[str, Any]]


class BaseStorage(ABC):
    """Persistence operations used by the API and generation service"""

    @abstractmethod
    async def get_user(self, id: str) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    async def create_user(self, user: UserCreate) -> User: ...

    @abstractmethod
    async def create_music_generation(
        self, generation: MusicGenerationCreate, user_id: Optional[str] = None
    ) -> MusicGeneration: ...

    @abstractmethod
    async def get_music_generation(self, id: str) -> Optional[MusicGeneration]: ...

    @abstractmethod
    async def get_music_generation_by_task_id(self, task_id: str) -> Optional[MusicGeneration]: ...

    @abstractmethod
    async def update_music_generation(
        self, id: str, updates: MusicUpdates
    ) -> Optional[MusicGeneration]: ...

    @abstractmethod
    async def get_user_music_generations(
        self, user_id: Optional[str] = None, limit: int = DEFAULT_LIST_LIMIT
    ) -> List[MusicGeneration]: ...

    @abstractmethod
    async def create_image_generation(
        self, generation: ImageGenerationCreate, user_id: Optional[str] = None
    ) -> ImageGeneration: ...

    @abstractmethod
    async def get_image_generation(self, id: str) -> Optional[ImageGeneration]: ...

    @abstractmethod
    async def update_image_generation(
        self, id: str, updates: ImageUpdates
    ) -> Optional[ImageGeneration]: ...

    @abstractmethod
    async def get_user_image_generations(
        self, user_id: Optional[str] = None, limit: int = DEFAULT_LIST_LIMIT
    ) -> List[ImageGeneration]: ...


class DatabaseStorage(BaseStorage):
    """SQLAlchemy-backed storage"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # User operations
    async def get_user(self, id: str) -> Optional[User]:
        async with self._session_factory() as session:
            return await UserRepository(session).get(id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        async with self._session_factory() as session:
            return await UserRepository(session).get_by_username(username)

    async def create_user(self, user: UserCreate) -> User:
        async with self._session_factory() as session:
            created = await UserRepository(session).create(user)
            await session.commit()
            return created

    # Music generation operations
    async def create_music_generation(
        self,
        generation: MusicGenerationCreate,
        user_id: Optional[str] = None
    ) -> MusicGeneration:
        """Insert a pending record with defaults for every optional field"""
        values = {
            "prompt": generation.prompt,
            "style": generation.style or None,
            "title": generation.title or None,
            "model": generation.model or DEFAULT_MUSIC_MODEL.value,
            "instrumental": bool(generation.instrumental),
            "duration": generation.duration,
            "user_id": user_id or None,
            "status": GenerationStatus.PENDING.value,
            "generation_metadata": None,
        }
        async with self._session_factory() as session:
            created = await MusicGenerationRepository(session).create(values)
            await session.commit()
            return created

    async def get_music_generation(self, id: str) -> Optional[MusicGeneration]:
        async with self._session_factory() as session:
            return await MusicGenerationRepository(session).get(id)

    async def get_music_generation_by_task_id(self, task_id: str) -> Optional[MusicGeneration]:
        async with self._session_factory() as session:
            return await MusicGenerationRepository(session).get_by_task_id(task_id)

    async def update_music_generation(
        self,
        id: str,
        updates: MusicUpdates
    ) -> Optional[MusicGeneration]:
        async with self._session_factory() as session:
            updated = await MusicGenerationRepository(session).update(id, updates)
            if updated is not None:
                await session.commit()
            return updated

    async def get_user_music_generations(
        self,
        user_id: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT
    ) -> List[MusicGeneration]:
        async with self._session_factory() as session:
            return await MusicGenerationRepository(session).list_for_owner(user_id, limit)

    # Image generation operations
    async def create_image_generation(
        self,
        generation: ImageGenerationCreate,
        user_id: Optional[str] = None
    ) -> ImageGeneration:
        values = {
            "prompt": generation.prompt,
            "title": generation.title or None,
            "music_generation_id": generation.music_generation_id or None,
            "user_id": user_id or None,
            "status": GenerationStatus.PENDING.value,
        }
        async with self._session_factory() as session:
            created = await ImageGenerationRepository(session).create(values)
            await session.commit()
            return created

    async def get_image_generation(self, id: str) -> Optional[ImageGeneration]:
        async with self._session_factory() as session:
            return await ImageGenerationRepository(session).get(id)

    async def update_image_generation(
        self,
        id: str,
        updates: ImageUpdates
    ) -> Optional[ImageGeneration]:
        async with self._session_factory() as session:
            updated = await ImageGenerationRepository(session).update(id, updates)
            if updated is not None:
                await session.commit()
            return updated

    async def get_user_image_generations(
        self,
        user_id: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT
    ) -> List[ImageGeneration]:
        async with self._session_factory() as session:
            return await ImageGenerationRepository(session).list_for_owner(user_id, limit)
