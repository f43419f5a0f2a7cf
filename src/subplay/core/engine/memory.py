from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, List, Optional, Sequence

from subplay.core.contracts import PlayerOptions
from subplay.core.engine.base import EventHandler
from subplay.core.errors import EngineDisposedError
from subplay.core_types import SourceDescriptor, TextTrackDescriptor


class MemoryEngine:
    """
    Headless engine: keeps a playhead and emits the same events a real
    player would. Used by the CLI demo and by tests.

    ready() callbacks fire on mark_ready(), or right away when
    auto_ready=True. Calls after dispose() raise EngineDisposedError.
    """

    def __init__(self, options: Optional[PlayerOptions] = None, *, auto_ready: bool = False, duration: float = 0.0) -> None:
        self.options = options or PlayerOptions()
        self.settings: Dict[str, Any] = self.options.engine_settings()
        self.auto_ready = auto_ready
        self.duration = duration

        self.sources: List[SourceDescriptor] = []
        self.source_pushes = 0
        self.text_tracks: List[TextTrackDescriptor] = []
        self.playing = False

        self._time = 0.0
        self._is_ready = False
        self._disposed = False
        self._ready_callbacks: List[Callable[[], None]] = []
        self._handlers: DefaultDict[str, List[EventHandler]] = defaultdict(list)

    # ---- engine surface ----

    def set_sources(self, sources: Sequence[SourceDescriptor]) -> None:
        self._check("set_sources")
        self.sources = list(sources)
        self.source_pushes += 1
        self.emit("loadstart")

    def play(self) -> None:
        self._check("play")
        self.playing = True

    def pause(self) -> None:
        self._check("pause")
        self.playing = False

    def seek(self, time: float) -> None:
        self._check("seek")
        self.emit("seeking")
        self._time = self._clamp(time)
        self.emit("seeked")

    def current_time(self) -> float:
        self._check("current_time")
        return self._time

    def on(self, event: str, handler: EventHandler) -> None:
        self._check("on")
        self._handlers[event].append(handler)

    def ready(self, callback: Callable[[], None]) -> None:
        self._check("ready")
        if self._is_ready:
            callback()
            return
        self._ready_callbacks.append(callback)
        if self.auto_ready:
            self.mark_ready()

    def add_remote_text_track(self, track: TextTrackDescriptor, manual_cleanup: bool) -> None:
        self._check("add_remote_text_track")
        self.text_tracks.append(track)

    def dispose(self) -> None:
        self._disposed = True
        self.playing = False
        self._handlers.clear()
        self._ready_callbacks.clear()

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    # ---- simulation helpers ----

    def mark_ready(self) -> None:
        self._check("mark_ready")
        self._is_ready = True
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for cb in callbacks:
            cb()
        self.emit("canplay")

    def advance(self, seconds: float) -> float:
        """Move the playhead forward and emit timeupdate."""
        self._check("advance")
        self._time = self._clamp(self._time + seconds)
        self.emit("timeupdate")
        return self._time

    def emit(self, event: str, *args: Any) -> None:
        for handler in list(self._handlers.get(event, ())):
            handler(*args)

    def fail(self, message: str) -> None:
        self.emit("error", message)

    def _clamp(self, t: float) -> float:
        t = max(0.0, float(t))
        if self.duration > 0:
            t = min(t, self.duration)
        return t

    def _check(self, operation: str) -> None:
        if self._disposed:
            raise EngineDisposedError(operation)


class MarkerMemoryEngine(MemoryEngine):
    """MemoryEngine with a markers plugin installed."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.marker_options: Optional[Dict[str, Any]] = None

    def add_markers(self, options: Dict[str, Any]) -> None:
        self._check("add_markers")
        self.marker_options = options


__all__ = ["MemoryEngine", "MarkerMemoryEngine"]
