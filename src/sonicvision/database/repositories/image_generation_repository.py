"""
Image Generation Repository
Database operations for image generation records
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import ImageGeneration
from ..schemas import ImageGenerationCreate, ImageGenerationUpdate
from .base import BaseRepository


class ImageGenerationRepository(
    BaseRepository[ImageGeneration, ImageGenerationCreate, ImageGenerationUpdate]
):
    """Repository for image generation operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(ImageGeneration, session)

    async def list_for_owner(
        self,
        user_id: Optional[str] = None,
        limit: int = 50
    ) -> List[ImageGeneration]:
        """Newest-first image generations, optionally for a single owner"""
        filters = {"user_id": user_id} if user_id else None
        return await self.get_multi(limit=limit, filters=filters)
