"""
SonicVision Repository Layer
Data access layer with async CRUD operations
"""

from .base import BaseRepository, ConflictError, RepositoryError
from .user_repository import UserRepository
from .music_generation_repository import MusicGenerationRepository
from .image_generation_repository import ImageGenerationRepository

__all__ = [
    "BaseRepository",
    "ConflictError",
    "RepositoryError",
    "UserRepository",
    "MusicGenerationRepository",
    "ImageGenerationRepository"
]
