"""
Music Generation Repository
Database operations for music generation records
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import MusicGeneration
from ..schemas import MusicGenerationCreate, MusicGenerationUpdate
from .base import BaseRepository


class MusicGenerationRepository(
    BaseRepository[MusicGeneration, MusicGenerationCreate, MusicGenerationUpdate]
):
    """Repository for music generation operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(MusicGeneration, session)

    async def list_for_owner(
        self,
        user_id: Optional[str] = None,
        limit: int = 50
    ) -> List[MusicGeneration]:
        """Newest-first music generations, optionally for a single owner"""
        filters = {"user_id": user_id} if user_id else None
        return await self.get_multi(limit=limit, filters=filters)

    async def get_by_task_id(self, task_id: str) -> Optional[MusicGeneration]:
        """Look up a record by the provider's task id"""
        return await self.get_by_field("task_id", task_id)
