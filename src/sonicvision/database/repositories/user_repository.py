"""
User Repository
Database operations for application users
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import User
from ..schemas import UserCreate
from .base import BaseRepository


class UserRepository(BaseRepository[User, UserCreate, UserCreate]):
    """Repository for user operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self.get_by_field("username", username)
