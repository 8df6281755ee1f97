"""
SonicVision Audio Player
Playback state controller driven by a media element's event stream
"""

import math
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

import structlog

from .media import MediaElement, MediaEvent
from .track import Track

logger = structlog.get_logger("sonicvision.player")


@dataclass(frozen=True)
class PlayerState:
    """Snapshot of the player; replaced on every change"""
    current_track: Optional[Track] = None
    is_playing: bool = False
    current_time: float = 0.0
    duration: float = 0.0
    volume: float = 1.0
    is_muted: bool = False
    is_loading: bool = False

    @property
    def effective_volume(self) -> float:
        return 0.0 if self.is_muted else self.volume


StateListener = Callable[[PlayerState], None]


def format_time(seconds: float) -> str:
    """Format seconds as m:ss; NaN and missing values render as 0:00"""
    if seconds is None or math.isnan(seconds) or math.isinf(seconds):
        return "0:00"

    mins = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{mins}:{secs:02d}"


class AudioPlayer:
    """
    Owns the currently loaded track and mirrors the media element.

    Time, duration and loading state are derived from element events rather
    than polled. The element listeners are registered on construction and
    removed by dispose().
    """

    def __init__(self, media: MediaElement):
        self._media = media
        self._state = PlayerState()
        self._subscribers: List[StateListener] = []
        self._disposed = False
        self._apply_volume()

        self._handlers = {
            MediaEvent.TIME_UPDATE: self._on_time_update,
            MediaEvent.LOADED_METADATA: self._on_loaded_metadata,
            MediaEvent.LOAD_START: self._on_load_start,
            MediaEvent.CAN_PLAY: self._on_can_play,
            MediaEvent.ENDED: self._on_ended,
        }
        for event, handler in self._handlers.items():
            self._media.add_event_listener(event, handler)

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def current_track(self) -> Optional[Track]:
        return self._state.current_track

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a function that unsubscribes it"""
        self._subscribers.append(listener)

        def unsubscribe() -> None:
            if listener in self._subscribers:
                self._subscribers.remove(listener)

        return unsubscribe

    def dispose(self) -> None:
        """Detach from the media element and drop all subscribers"""
        if self._disposed:
            return

        for event, handler in self._handlers.items():
            self._media.remove_event_listener(event, handler)
        self._subscribers.clear()
        self._disposed = True

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def load_track(self, track: Track) -> None:
        """Replace the current track and start loading its audio"""
        self._set_state(current_track=track, is_playing=False, current_time=0.0)
        self._media.src = track.audio_url
        self._media.load()
        logger.debug("Track loaded", track_id=track.id, audio_url=track.audio_url)

    async def play(self) -> None:
        """Start playback; a refused play is logged and leaves the player paused"""
        if self._state.current_track is None:
            return

        try:
            await self._media.play()
        except Exception as e:
            logger.error(
                "Failed to play audio",
                track_id=self._state.current_track.id,
                error=str(e)
            )
            return

        self._set_state(is_playing=True)

    def pause(self) -> None:
        self._media.pause()
        self._set_state(is_playing=False)

    async def toggle_play_pause(self) -> None:
        if self._state.is_playing:
            self.pause()
        else:
            await self.play()

    def seek(self, time: float) -> None:
        """Move the playhead; the element applies its own bounds"""
        self._media.current_time = time
        self._set_state(current_time=self._media.current_time)

    def set_volume(self, volume: float) -> None:
        """Store a volume in [0, 1]; the element stays silent while muted"""
        volume = float(volume)
        if math.isnan(volume):
            logger.warning("Ignoring NaN volume")
            return
        volume = min(max(volume, 0.0), 1.0)
        self._set_state(volume=volume)
        self._apply_volume()

    def toggle_mute(self) -> None:
        self._set_state(is_muted=not self._state.is_muted)
        self._apply_volume()

    format_time = staticmethod(format_time)

    # ------------------------------------------------------------------
    # Media element events
    # ------------------------------------------------------------------
    def _on_time_update(self) -> None:
        self._set_state(current_time=self._media.current_time)

    def _on_loaded_metadata(self) -> None:
        self._set_state(duration=self._media.duration)

    def _on_load_start(self) -> None:
        self._set_state(is_loading=True)

    def _on_can_play(self) -> None:
        self._set_state(is_loading=False)

    def _on_ended(self) -> None:
        self._set_state(is_playing=False, current_time=0.0)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _apply_volume(self) -> None:
        self._media.volume = self._state.effective_volume

    def _set_state(self, **changes) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return

        self._state = new_state
        for listener in list(self._subscribers):
            try:
                listener(new_state)
            except Exception as e:
                logger.error("Player state listener failed", error=str(e))
