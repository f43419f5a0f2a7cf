from __future__ import annotations

from typing import Any, Callable, Dict, Protocol, Sequence, runtime_checkable

from subplay.core.contracts import PlayerOptions
from subplay.core_types import SourceDescriptor, TextTrackDescriptor

EventHandler = Callable[..., None]

# All three funnel into the same chapter lookup.
TIMING_EVENTS = ("timeupdate", "seeking", "seeked")
# Forwarded to the event sink. Readiness goes through ready().
LIFECYCLE_EVENTS = ("error", "loadstart", "canplay")


class PlaybackEngine(Protocol):
    """
    The media-player engine consumed by a playback session.

    Implementations own decoding/rendering; the session only drives them
    through this surface.
    """

    def set_sources(self, sources: Sequence[SourceDescriptor]) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, time: float) -> None: ...

    def current_time(self) -> float: ...

    def on(self, event: str, handler: EventHandler) -> None: ...

    def ready(self, callback: Callable[[], None]) -> None: ...

    def add_remote_text_track(self, track: TextTrackDescriptor, manual_cleanup: bool) -> None: ...

    def dispose(self) -> None: ...

    @property
    def is_disposed(self) -> bool: ...


@runtime_checkable
class MarkerCapable(Protocol):
    """Optional timeline-marker surface (a markers plugin)."""

    def add_markers(self, options: Dict[str, Any]) -> None: ...


def supports_markers(engine: Any) -> bool:
    return isinstance(engine, MarkerCapable)


EngineFactory = Callable[[PlayerOptions], PlaybackEngine]


__all__ = [
    "EventHandler",
    "TIMING_EVENTS",
    "LIFECYCLE_EVENTS",
    "PlaybackEngine",
    "MarkerCapable",
    "supports_markers",
    "EngineFactory",
]
