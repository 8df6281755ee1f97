"""
SonicVision Service Layer
Generation providers and the workflow that drives generation records
"""

from .generation_service import GenerationService
from .image_provider import ImagePayload, ImageProvider
from .suno_provider import ProviderTaskStatus, SunoProvider

__all__ = [
    "GenerationService",
    "ImagePayload",
    "ImageProvider",
    "ProviderTaskStatus",
    "SunoProvider"
]
