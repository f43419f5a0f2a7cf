from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple

from subplay.core.captions.convert import srt_to_vtt
from subplay.core.captions.fetch import Fetcher
from subplay.core.captions.loader import CaptionLoader
from subplay.core.chapters.markers import marker_plugin_options
from subplay.core.chapters.tracker import ChapterTracker
from subplay.core.contracts import DEFAULT_MARKER_STYLE, LoadReport, MarkerStyle, PlayerOptions
from subplay.core.engine.base import LIFECYCLE_EVENTS, TIMING_EVENTS, EngineFactory, PlaybackEngine, supports_markers
from subplay.core.errors import SessionStateError
from subplay.core.events import EventSink, NullEventSink
from subplay.core.resources.ledger import BlobStore, ResourceAllocator, ResourceLedger
from subplay.core_types import CaptionSpec, Chapter, SourceDescriptor, TextTrackDescriptor

_SINK_EVENTS = {"error": "ENGINE_ERROR", "loadstart": "VIDEO_LOADSTART", "canplay": "VIDEO_CANPLAY"}


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    DISPOSED = "disposed"


class PlaybackSession:
    """
    Owns one engine instance and every caption resource created for it.

    Uninitialized -> Initializing (start) -> Ready (engine ready signal)
    -> Disposed (dispose). A session is never restarted; a new source list
    means a new session (see PlayerHost).
    """

    def __init__(
        self,
        *,
        sources: Sequence[SourceDescriptor],
        engine_factory: EngineFactory,
        fetch: Fetcher,
        options: Optional[PlayerOptions] = None,
        chapters: Sequence[Chapter] = (),
        captions: Sequence[CaptionSpec] = (),
        allocator: Optional[ResourceAllocator] = None,
        sink: Optional[EventSink] = None,
        convert: Callable[[str], str] = srt_to_vtt,
        marker_style: MarkerStyle = DEFAULT_MARKER_STYLE,
    ) -> None:
        self.sources = sources
        self.options = options or PlayerOptions()
        self.chapters: Tuple[Chapter, ...] = tuple(chapters)
        self.captions: Tuple[CaptionSpec, ...] = tuple(captions)
        self.engine_factory = engine_factory
        self.marker_style = marker_style
        self.sink = sink or NullEventSink()

        self.tracker = ChapterTracker(self.chapters)
        self.ledger = ResourceLedger(allocator or BlobStore(), sink=self.sink)
        self.loader = CaptionLoader(
            fetch=fetch,
            ledger=self.ledger,
            convert=convert,
            is_live=self.is_live,
            sink=self.sink,
        )

        self.caption_task: Optional[asyncio.Task[LoadReport]] = None
        self._engine: Optional[PlaybackEngine] = None
        self._state = SessionState.UNINITIALIZED
        self._captions_pending = False

    # ---- lifecycle ----

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def engine(self) -> Optional[PlaybackEngine]:
        return self._engine

    @property
    def active_chapter(self) -> Optional[Chapter]:
        return self.tracker.current

    def is_live(self) -> bool:
        return self._state is SessionState.READY and self._engine is not None and not self._engine.is_disposed

    def start(self) -> None:
        if self._state is not SessionState.UNINITIALIZED:
            raise SessionStateError(f"session cannot start from state={self._state.value}")
        if not self.sources:
            raise SessionStateError("session needs at least one source")

        self._state = SessionState.INITIALIZING
        engine = self.engine_factory(self.options)
        self._engine = engine

        for event in LIFECYCLE_EVENTS:
            engine.on(event, self._forwarder(_SINK_EVENTS[event]))
        engine.set_sources(self.sources)
        engine.ready(self._on_ready)

    def _on_ready(self) -> None:
        if self._state is not SessionState.INITIALIZING or self._engine is None:
            # disposed before the engine came up
            return
        engine = self._engine
        self._state = SessionState.READY
        self.sink.emit("PLAYER_READY")

        for event in TIMING_EVENTS:
            engine.on(event, self._on_timing)

        if self.chapters and supports_markers(engine):
            engine.add_markers(marker_plugin_options(self.chapters, self.marker_style))  # type: ignore[attr-defined]
            self.sink.emit("CHAPTER_MARKERS_ADDED", count=len(self.chapters))

        if self.captions:
            self._schedule_captions()

    def _schedule_captions(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # ready fired from synchronous code; load_captions() picks this up
            self._captions_pending = True
            self.sink.emit("CAPTION_LOAD_DEFERRED", reason="no running event loop", count=len(self.captions))
            return
        self._captions_pending = False
        self.caption_task = loop.create_task(self.loader.load(self.captions, self._attach))

    def load_captions(self) -> Optional[asyncio.Task[LoadReport]]:
        """
        Start a caption load that was deferred because the engine became
        ready outside an event loop. Call from inside the loop; returns the
        load task (None when there is nothing to load).
        """
        if self._captions_pending and self.is_live():
            self._schedule_captions()
        return self.caption_task

    def dispose(self) -> None:
        if self._state is SessionState.DISPOSED:
            return
        self._state = SessionState.DISPOSED
        self._captions_pending = False

        engine, self._engine = self._engine, None
        try:
            if engine is not None:
                engine.dispose()
        except Exception as e:
            self.sink.emit("ENGINE_DISPOSE_FAILED", error=f"{type(e).__name__}: {e}")
        finally:
            self.ledger.release_all()
            self.tracker.clear_listeners()
        self.sink.emit("SESSION_DISPOSED")

    # ---- engine events ----

    def _on_timing(self, *_: Any) -> None:
        if self._engine is None:
            return
        self.tracker.update(self._engine.current_time())

    def _forwarder(self, name: str) -> Callable[..., None]:
        def _forward(*args: Any) -> None:
            if args:
                self.sink.emit(name, detail=args[0])
            else:
                self.sink.emit(name)

        return _forward

    def _attach(self, spec: CaptionSpec, url: str, is_default: bool) -> None:
        if not self.is_live():
            self.sink.emit("CAPTION_ATTACH_DROPPED", label=spec.label)
            return
        track = TextTrackDescriptor(
            kind=spec.kind,
            src=url,
            srclang=spec.srclang,
            label=spec.label,
            default=is_default,
        )
        self._engine.add_remote_text_track(track, False)  # type: ignore[union-attr]

    # ---- commands from the rendering side ----

    def update_sources(self, sources: Optional[Sequence[SourceDescriptor]] = None) -> None:
        """Re-push sources to the running engine without rebuilding the session."""
        if self._engine is None or self._state is SessionState.DISPOSED:
            return
        if sources is not None:
            self.sources = sources
        self._engine.set_sources(self.sources)

    def seek(self, time: float) -> None:
        if self._engine is None:
            return
        self._engine.seek(time)
        self._engine.play()

    def seek_to_chapter(self, chapter: Chapter) -> None:
        self.seek(chapter.start_time)


@dataclass(frozen=True, eq=False)
class PlayerProps:
    """
    Inputs from the rendering side.

    sources, chapters and captions are compared by identity: the same list
    object means "unchanged" even if it was mutated in place.
    """

    sources: Sequence[SourceDescriptor]
    options: PlayerOptions = field(default_factory=PlayerOptions)
    chapters: Sequence[Chapter] = ()
    captions: Sequence[CaptionSpec] = ()


class PlayerHost:
    """
    Mount/update/unmount driver that keeps at most one live session.
    """

    def __init__(
        self,
        *,
        engine_factory: EngineFactory,
        fetch: Fetcher,
        allocator_factory: Callable[[], ResourceAllocator] = BlobStore,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.engine_factory = engine_factory
        self.fetch = fetch
        self.allocator_factory = allocator_factory
        self.sink = sink or NullEventSink()
        self.props: Optional[PlayerProps] = None
        self.session: Optional[PlaybackSession] = None

    def mount(self, props: PlayerProps) -> Optional[PlaybackSession]:
        if self.session is not None:
            raise SessionStateError("host already mounted; use update()")
        self.props = props
        self.session = self._build(props)
        return self.session

    def update(self, props: PlayerProps) -> Optional[PlaybackSession]:
        prev = self.props
        if prev is None:
            return self.mount(props)

        self.props = props
        if self._needs_rebuild(prev, props):
            self._teardown()
            self.session = self._build(props)
        else:
            self.refresh_sources()
        return self.session

    def refresh_sources(self) -> None:
        """The current source list was mutated in place: push it again."""
        if self.props is None:
            return
        if self.session is None:
            # mounted with an empty list that has since been filled
            self.session = self._build(self.props)
        else:
            self.session.update_sources(self.props.sources)

    def unmount(self) -> None:
        self._teardown()
        self.props = None

    @staticmethod
    def _needs_rebuild(prev: PlayerProps, new: PlayerProps) -> bool:
        return (
            prev.sources is not new.sources
            or prev.chapters is not new.chapters
            or prev.captions is not new.captions
            or prev.options != new.options
        )

    def _build(self, props: PlayerProps) -> Optional[PlaybackSession]:
        if not props.sources:
            self.sink.emit("SESSION_SKIPPED", reason="no sources")
            return None
        session = PlaybackSession(
            sources=props.sources,
            options=props.options,
            chapters=props.chapters,
            captions=props.captions,
            engine_factory=self.engine_factory,
            fetch=self.fetch,
            allocator=self.allocator_factory(),
            sink=self.sink,
        )
        session.start()
        return session

    def _teardown(self) -> None:
        session, self.session = self.session, None
        if session is not None:
            session.dispose()


__all__ = ["SessionState", "PlaybackSession", "PlayerProps", "PlayerHost"]
