"""
SonicVision Player
Client-side playback and gallery state over generation records
"""

from .audio_player import AudioPlayer, PlayerState, format_time
from .gallery import GalleryActions, ImageGallery, is_displayable
from .media import MediaElement, MediaEvent, MediaEventTarget
from .track import Track

__all__ = [
    "AudioPlayer",
    "PlayerState",
    "format_time",
    "GalleryActions",
    "ImageGallery",
    "is_displayable",
    "MediaElement",
    "MediaEvent",
    "MediaEventTarget",
    "Track"
]
