"""
SonicVision Database Module
Exports database models, connection management, storage and Base
"""

from .connection import Base, DatabaseManager, database_manager
from .models import User, MusicGeneration, ImageGeneration
from .storage import BaseStorage, DatabaseStorage

__all__ = [
    "Base",
    "DatabaseManager",
    "database_manager",
    "User",
    "MusicGeneration",
    "ImageGeneration",
    "BaseStorage",
    "DatabaseStorage"
]
