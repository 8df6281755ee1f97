"""
SonicVision Track
Client-side projection of a music generation for playback
"""

from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_TRACK_TITLE = "Untitled Track"


@dataclass(frozen=True)
class Track:
    """Playable track"""
    id: str
    title: str
    audio_url: str
    artist: Optional[str] = None
    image_url: Optional[str] = None
    duration: Optional[float] = None
    style: Optional[str] = None

    @classmethod
    def from_generation(
        cls,
        generation: Any,
        image_url: Optional[str] = None,
        artist: Optional[str] = None
    ) -> Optional["Track"]:
        """
        Build a track from a music generation record.

        Returns None when the record has no audio URL, whatever its status
        says; such a record is not playable.

        Args:
            generation: MusicGeneration model or MusicGenerationResponse schema
            image_url: Paired image overriding the provider cover art
            artist: Display artist
        """
        audio_url = getattr(generation, "audio_url", None)
        if not audio_url:
            return None

        return cls(
            id=str(generation.id),
            title=generation.title or DEFAULT_TRACK_TITLE,
            audio_url=audio_url,
            artist=artist,
            image_url=image_url or getattr(generation, "image_url", None),
            duration=generation.duration,
            style=generation.style,
        )
