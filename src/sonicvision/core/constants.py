"""
SonicVision Constants
Genre, model and tag tables shared by the API and the client controllers
"""

from enum import Enum
from typing import Dict, List


class GenerationStatus(str, Enum):
    """Lifecycle status of a generation record"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (GenerationStatus.COMPLETED, GenerationStatus.FAILED)

    def can_transition_to(self, target: "GenerationStatus") -> bool:
        """Status only moves forward: pending -> processing -> completed|failed"""
        if self.is_terminal:
            return False
        return _STATUS_RANK[target] > _STATUS_RANK[self]


_STATUS_RANK = {
    GenerationStatus.PENDING: 0,
    GenerationStatus.PROCESSING: 1,
    GenerationStatus.COMPLETED: 2,
    GenerationStatus.FAILED: 2,
}


class MusicModel(str, Enum):
    """Music provider model versions"""
    V5 = "V5"
    V4_5PLUS = "V4_5PLUS"
    V4_5 = "V4_5"
    V4 = "V4"
    V3_5 = "V3_5"


DEFAULT_MUSIC_MODEL = MusicModel.V5

MUSIC_GENRES: List[Dict[str, str]] = [
    {"value": "indie-pop", "label": "Indie Pop"},
    {"value": "lo-fi", "label": "Lo-Fi Hip Hop"},
    {"value": "electronic", "label": "Electronic"},
    {"value": "rock", "label": "Rock"},
    {"value": "jazz", "label": "Jazz"},
    {"value": "classical", "label": "Classical"},
    {"value": "ambient", "label": "Ambient"},
    {"value": "pop", "label": "Pop"},
    {"value": "blues", "label": "Blues"},
    {"value": "country", "label": "Country"},
    {"value": "folk", "label": "Folk"},
    {"value": "metal", "label": "Metal"},
    {"value": "reggae", "label": "Reggae"},
    {"value": "trap", "label": "Trap"},
    {"value": "house", "label": "House"},
]

MUSIC_MODELS: List[Dict[str, str]] = [
    {"value": "V5", "label": "Suno V5 (Latest)", "description": "Best quality, fastest generation"},
    {"value": "V4_5PLUS", "label": "Suno V4.5 Plus", "description": "Enhanced creative controls"},
    {"value": "V4_5", "label": "Suno V4.5", "description": "Genre blending capabilities"},
    {"value": "V4", "label": "Suno V4", "description": "Refined song structure"},
    {"value": "V3_5", "label": "Suno V3.5", "description": "Creative diversity baseline"},
]

QUICK_TAGS: List[str] = [
    "Upbeat", "Dreamy", "Melancholic", "Energetic", "Chill", "Cinematic",
    "Dark", "Bright", "Nostalgic", "Futuristic", "Romantic", "Epic",
    "Mysterious", "Peaceful", "Intense", "Playful", "Emotional", "Powerful",
]

GENERATION_STATUS: Dict[str, str] = {status.name: status.value for status in GenerationStatus}

POLLING_INTERVAL = 2.0  # seconds
MAX_POLL_ATTEMPTS = 150
MAX_PROMPT_LENGTH = 5000
IMAGES_PER_PAGE = 5
DEFAULT_LIST_LIMIT = 50
