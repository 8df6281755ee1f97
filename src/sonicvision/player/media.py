"""
SonicVision Media Element Abstraction
Interface over a playable media element and its event stream
"""

from enum import Enum
from typing import Callable, Dict, List, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger("sonicvision.player")

MediaListener = Callable[[], None]


class MediaEvent(str, Enum):
    """Media element lifecycle events the player subscribes to"""
    TIME_UPDATE = "timeupdate"
    LOADED_METADATA = "loadedmetadata"
    LOAD_START = "loadstart"
    CAN_PLAY = "canplay"
    ENDED = "ended"


@runtime_checkable
class MediaElement(Protocol):
    """A playable media element (an HTML audio element, a native backend, a fake)"""

    src: str
    current_time: float
    duration: float
    volume: float

    def load(self) -> None: ...

    async def play(self) -> None:
        """Start playback; raises when the backend refuses (e.g. autoplay policy)"""
        ...

    def pause(self) -> None: ...

    def add_event_listener(self, event: MediaEvent, listener: MediaListener) -> None: ...

    def remove_event_listener(self, event: MediaEvent, listener: MediaListener) -> None: ...


class MediaEventTarget:
    """Listener registry that concrete media elements can build on"""

    def __init__(self):
        self._listeners: Dict[MediaEvent, List[MediaListener]] = {}

    def add_event_listener(self, event: MediaEvent, listener: MediaListener) -> None:
        listeners = self._listeners.setdefault(MediaEvent(event), [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, event: MediaEvent, listener: MediaListener) -> None:
        listeners = self._listeners.get(MediaEvent(event), [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: MediaEvent) -> int:
        return len(self._listeners.get(MediaEvent(event), []))

    def dispatch_event(self, event: MediaEvent) -> None:
        """Invoke listeners in registration order; one failing listener does not stop the rest"""
        for listener in list(self._listeners.get(MediaEvent(event), [])):
            try:
                listener()
            except Exception as e:
                logger.error("Media listener failed", media_event=MediaEvent(event).value, error=str(e))
