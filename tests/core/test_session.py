from __future__ import annotations

import asyncio
from typing import List

import pytest

from subplay.core.contracts import PlayerOptions
from subplay.core.engine.memory import MarkerMemoryEngine, MemoryEngine
from subplay.core.errors import SessionStateError
from subplay.core.resources.ledger import BlobStore
from subplay.core.session import PlaybackSession, PlayerHost, PlayerProps, SessionState
from subplay.core_types import Chapter, SourceDescriptor

from tests._helpers import FakeFetcher, RecordingSink, make_specs, srt_block

SRT = srt_block(1, "00:00:00,000", "00:00:01,000", "Hi").encode("utf-8")
SOURCES = [SourceDescriptor(src="https://example.com/v.m3u8", type="application/x-mpegURL", label="HLS")]
CHAPTERS = [Chapter(time=0, title="A"), Chapter(time=30, title="B"), Chapter(time=90, title="C")]


class EngineFactory:
    def __init__(self, cls=MemoryEngine) -> None:
        self.cls = cls
        self.engines: List[MemoryEngine] = []

    def __call__(self, options: PlayerOptions) -> MemoryEngine:
        engine = self.cls(options)
        self.engines.append(engine)
        return engine

    @property
    def last(self) -> MemoryEngine:
        return self.engines[-1]


def _session(factory, **kw) -> PlaybackSession:
    kw.setdefault("fetch", FakeFetcher({}))
    return PlaybackSession(sources=SOURCES, engine_factory=factory, **kw)


def test_lifecycle_and_chapter_tracking() -> None:
    factory = EngineFactory()
    sink = RecordingSink()
    session = _session(factory, chapters=CHAPTERS, sink=sink)
    assert session.state is SessionState.UNINITIALIZED

    session.start()
    assert session.state is SessionState.INITIALIZING
    assert factory.last.sources == SOURCES

    # timing events before ready are not wired yet
    factory.last.advance(40)
    assert session.active_chapter is None

    factory.last.mark_ready()
    assert session.state is SessionState.READY

    factory.last.advance(5)
    assert session.active_chapter.title == "B"
    session.seek(95)
    assert session.active_chapter.title == "C"
    assert factory.last.playing is True
    session.seek_to_chapter(CHAPTERS[0])
    assert session.active_chapter.title == "A"

    session.dispose()
    assert session.state is SessionState.DISPOSED
    assert factory.last.is_disposed
    assert "PLAYER_READY" in sink.names()
    assert sink.names()[-1] == "SESSION_DISPOSED"


def test_no_reinitialization() -> None:
    session = _session(EngineFactory())
    session.start()
    with pytest.raises(SessionStateError):
        session.start()

    empty = PlaybackSession(sources=[], engine_factory=EngineFactory(), fetch=FakeFetcher({}))
    with pytest.raises(SessionStateError):
        empty.start()


def test_markers_only_when_engine_supports_them() -> None:
    with_markers = EngineFactory(MarkerMemoryEngine)
    s1 = _session(with_markers, chapters=CHAPTERS)
    s1.start()
    with_markers.last.mark_ready()
    assert [m["text"] for m in with_markers.last.marker_options["markers"]] == ["A", "B", "C"]

    plain = EngineFactory()
    s2 = _session(plain, chapters=CHAPTERS)
    s2.start()
    plain.last.mark_ready()
    assert s2.state is SessionState.READY


def test_engine_errors_go_to_sink() -> None:
    factory = EngineFactory()
    sink = RecordingSink()
    session = _session(factory, sink=sink)
    session.start()
    factory.last.mark_ready()
    factory.last.fail("MEDIA_ERR_DECODE")

    assert ("ENGINE_ERROR", {"detail": "MEDIA_ERR_DECODE"}) in sink.events
    assert session.state is SessionState.READY


def test_captions_attached_after_ready() -> None:
    async def main() -> None:
        factory = EngineFactory()
        specs = make_specs(3)
        fetch = FakeFetcher({specs[0].src: SRT, specs[2].src: SRT})
        store = BlobStore()
        session = _session(factory, captions=specs, fetch=fetch, allocator=store)
        session.start()
        assert session.caption_task is None

        factory.last.mark_ready()
        report = await session.caption_task

        tracks = factory.last.text_tracks
        assert [t.label for t in tracks] == ["Track 0", "Track 2"]
        assert [t.default for t in tracks] == [True, False]
        assert all(t.src.startswith("blob:subplay/") for t in tracks)
        assert report.attached == [0, 2]
        assert store.live_count == 2

        session.dispose()
        assert store.live_count == 0
        assert len(session.ledger) == 0

    asyncio.run(main())


def test_dispose_mid_load_releases_everything_and_stops_attaching() -> None:
    async def main() -> None:
        factory = EngineFactory()
        specs = make_specs(3)
        gate = asyncio.Event()

        async def fetch(location: str) -> bytes:
            if location == specs[1].src:
                await gate.wait()
            return SRT

        store = BlobStore()
        sink = RecordingSink()
        session = _session(factory, captions=specs, fetch=fetch, allocator=store, sink=sink)
        session.start()
        engine = factory.last
        engine.mark_ready()

        # let track 0 land, track 1 is now parked in fetch
        while not engine.text_tracks:
            await asyncio.sleep(0)

        session.dispose()
        assert store.live_count == 0

        gate.set()
        report = await session.caption_task

        assert [t.label for t in engine.text_tracks] == ["Track 0"]
        assert report.abandoned is True
        assert store.live_count == 0
        assert "CAPTION_LOAD_ABANDONED" in sink.names()

    asyncio.run(main())


def test_dispose_before_ready() -> None:
    factory = EngineFactory()
    session = _session(factory, captions=make_specs(1))
    session.start()
    session.dispose()
    session.dispose()
    assert session.state is SessionState.DISPOSED
    assert factory.last.is_disposed
    assert session.caption_task is None


def test_host_rebuilds_on_identity_change() -> None:
    factory = EngineFactory()
    host = PlayerHost(engine_factory=factory, fetch=FakeFetcher({}))
    props = PlayerProps(sources=SOURCES, chapters=CHAPTERS)

    first = host.mount(props)
    assert first is not None and first.state is SessionState.INITIALIZING

    # a different list object is a different source list: full rebuild
    sources2 = list(SOURCES)
    host.update(PlayerProps(sources=sources2, chapters=CHAPTERS))
    second = host.session
    assert second is not first
    assert first.state is SessionState.DISPOSED
    assert factory.engines[0].is_disposed

    # same list object mutated in place: narrow re-push, same session
    sources2.append(SourceDescriptor(src="https://example.com/v.mpd", type="application/dash+xml"))
    host.refresh_sources()
    assert host.session is second
    assert factory.last.source_pushes == 2
    assert len(factory.last.sources) == 2

    host.update(PlayerProps(sources=sources2, chapters=CHAPTERS))
    assert host.session is second
    assert factory.last.source_pushes == 3

    host.update(PlayerProps(sources=sources2, chapters=CHAPTERS, options=PlayerOptions(autoplay=True)))
    assert host.session is not second
    assert len(factory.engines) == 3

    host.unmount()
    assert host.session is None
    assert all(e.is_disposed for e in factory.engines)


def test_host_without_sources_builds_nothing() -> None:
    factory = EngineFactory()
    host = PlayerHost(engine_factory=factory, fetch=FakeFetcher({}))
    sources: list = []
    assert host.mount(PlayerProps(sources=sources)) is None
    assert factory.engines == []

    sources.extend(SOURCES)
    host.refresh_sources()
    assert host.session is not None
    assert len(factory.engines) == 1

    with pytest.raises(SessionStateError):
        host.mount(PlayerProps(sources=SOURCES))


def test_lifecycle_events_forwarded_to_sink() -> None:
    factory = EngineFactory()
    sink = RecordingSink()
    session = _session(factory, sink=sink)
    session.start()
    assert sink.names() == ["VIDEO_LOADSTART"]

    factory.last.mark_ready()
    assert sink.names() == ["VIDEO_LOADSTART", "PLAYER_READY", "VIDEO_CANPLAY"]


def test_ready_outside_event_loop_defers_caption_load() -> None:
    class AutoReady(MemoryEngine):
        def __init__(self, options: PlayerOptions) -> None:
            super().__init__(options, auto_ready=True)

    factory = EngineFactory(AutoReady)
    specs = make_specs(2)
    sink = RecordingSink()
    session = _session(factory, captions=specs, fetch=FakeFetcher({specs[0].src: SRT, specs[1].src: SRT}), sink=sink)

    session.start()
    assert session.state is SessionState.READY
    assert session.caption_task is None
    assert ("CAPTION_LOAD_DEFERRED", {"reason": "no running event loop", "count": 2}) in sink.events

    async def main() -> None:
        task = session.load_captions()
        assert task is not None
        report = await task
        assert report.attached == [0, 1]
        assert session.load_captions() is task

    asyncio.run(main())
    assert [t.label for t in factory.last.text_tracks] == ["Track 0", "Track 1"]


def test_deferred_caption_load_dropped_after_dispose() -> None:
    factory = EngineFactory(lambda options: MemoryEngine(options, auto_ready=True))
    session = _session(factory, captions=make_specs(1))
    session.start()
    session.dispose()

    async def main() -> None:
        assert session.load_captions() is None

    asyncio.run(main())


def test_dispose_releases_resources_when_engine_dispose_raises() -> None:
    class BrokenDispose(MemoryEngine):
        def dispose(self) -> None:
            super().dispose()
            raise RuntimeError("player already torn down")

    factory = EngineFactory(BrokenDispose)
    store = BlobStore()
    sink = RecordingSink()
    session = _session(factory, chapters=CHAPTERS, allocator=store, sink=sink)
    session.start()
    factory.last.mark_ready()
    session.ledger.register("WEBVTT\n", "text/vtt")
    seen = []
    session.tracker.subscribe(seen.append)

    session.dispose()

    assert store.live_count == 0
    assert len(session.ledger) == 0
    assert session.state is SessionState.DISPOSED
    assert ("ENGINE_DISPOSE_FAILED", {"error": "RuntimeError: player already torn down"}) in sink.events
    assert sink.names()[-1] == "SESSION_DISPOSED"

    session.tracker.update(40)
    assert seen == []


def test_chapter_tracking_continues_while_caption_fetch_is_pending() -> None:
    async def main() -> None:
        factory = EngineFactory()
        specs = make_specs(1)
        gate = asyncio.Event()

        async def fetch(location: str) -> bytes:
            await gate.wait()
            return SRT

        session = _session(factory, chapters=CHAPTERS, captions=specs, fetch=fetch)
        session.start()
        engine = factory.last
        engine.mark_ready()
        await asyncio.sleep(0)
        assert not session.caption_task.done()

        engine.advance(45)
        assert session.active_chapter.title == "B"
        engine.advance(50)
        assert session.active_chapter.title == "C"
        assert engine.text_tracks == []

        gate.set()
        await session.caption_task
        assert [t.label for t in engine.text_tracks] == ["Track 0"]

    asyncio.run(main())


def test_attach_after_dispose_is_dropped() -> None:
    factory = EngineFactory()
    sink = RecordingSink()
    spec = make_specs(1)[0]
    session = _session(factory, sink=sink)
    session.start()
    factory.last.mark_ready()
    session.dispose()

    session._attach(spec, "blob:subplay/late", True)

    assert factory.last.text_tracks == []
    assert ("CAPTION_ATTACH_DROPPED", {"label": "Track 0"}) in sink.events
