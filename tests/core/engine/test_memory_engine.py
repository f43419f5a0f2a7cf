from __future__ import annotations

import pytest

from subplay.core.contracts import PlayerOptions
from subplay.core.engine.base import supports_markers
from subplay.core.engine.memory import MarkerMemoryEngine, MemoryEngine
from subplay.core.errors import EngineDisposedError
from subplay.core_types import SourceDescriptor


def test_engine_settings_from_options() -> None:
    engine = MemoryEngine(PlayerOptions(height="500px", poster="p.jpg"))
    assert engine.settings["height"] == "500px"
    assert engine.settings["poster"] == "p.jpg"
    assert engine.settings["preload"] == "metadata"
    assert engine.settings["playbackRates"] == [0.5, 1, 1.25, 1.5, 2]


def test_events_and_playhead() -> None:
    engine = MemoryEngine(duration=60)
    events = []
    for name in ("timeupdate", "seeking", "seeked", "loadstart"):
        engine.on(name, lambda *_, n=name: events.append(n))

    engine.set_sources([SourceDescriptor(src="a.m3u8", type="application/x-mpegURL")])
    engine.advance(10)
    engine.seek(100)

    assert events == ["loadstart", "timeupdate", "seeking", "seeked"]
    assert engine.current_time() == 60


def test_ready_callbacks() -> None:
    engine = MemoryEngine()
    fired = []
    engine.ready(lambda: fired.append("first"))
    assert fired == []
    engine.mark_ready()
    engine.ready(lambda: fired.append("late"))
    assert fired == ["first", "late"]

    auto = MemoryEngine(auto_ready=True)
    auto.ready(lambda: fired.append("auto"))
    assert fired[-1] == "auto"


def test_disposed_engine_rejects_calls() -> None:
    engine = MemoryEngine()
    engine.dispose()
    assert engine.is_disposed
    with pytest.raises(EngineDisposedError):
        engine.play()


def test_marker_capability() -> None:
    assert supports_markers(MarkerMemoryEngine())
    assert not supports_markers(MemoryEngine())
