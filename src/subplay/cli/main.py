from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import TypeAdapter, ValidationError

from subplay import samples
from subplay.config import load_config
from subplay.core.captions.convert import decode_caption_bytes, srt_to_vtt
from subplay.core.captions.fetch import make_fetcher
from subplay.core.chapters.tracker import active_chapter
from subplay.core.contracts import PlayerOptions
from subplay.core.engine.memory import MarkerMemoryEngine
from subplay.core.events import LoggingEventSink
from subplay.core.session import PlayerHost, PlayerProps
from subplay.core_types import CaptionSpec, Chapter
from subplay.utils.logger import configure_logging, parse_level

app = typer.Typer(help="Caption conversion and chapter tracking for a media-player engine")

_CHAPTERS = TypeAdapter(List[Chapter])


def _load_chapters(path: Optional[Path]) -> List[Chapter]:
    if path is None:
        return list(samples.CHAPTERS)
    try:
        return _CHAPTERS.validate_python(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as e:
        raise typer.BadParameter(f"invalid chapters file {path}: {e}") from e


@app.command()
def convert(
    input: Path = typer.Argument(..., exists=True, dir_okay=False, help="Input .srt file"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output .vtt path (default: stdout)"),
    encoding: str = typer.Option("utf-8", help="Input text encoding"),
):
    """Convert an SRT file to WebVTT."""
    vtt = srt_to_vtt(decode_caption_bytes(input.read_bytes(), encoding=encoding))
    if out is None:
        typer.echo(vtt)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(vtt + "\n", encoding="utf-8")
    typer.echo(f"wrote {out}")


@app.command()
def chapter(
    at: float = typer.Option(..., "--at", help="Playback position in seconds"),
    chapters: Optional[Path] = typer.Option(None, help="Chapters JSON ([{time, title, description}]); default: sample chapters"),
):
    """Print the chapter active at a playback position."""
    found = active_chapter(_load_chapters(chapters), at)
    if found is None:
        typer.echo("(no chapters)")
        raise typer.Exit(code=1)
    typer.echo(found.title)


async def _run_demo(
    *,
    chapter_list: List[Chapter],
    captions: List[CaptionSpec],
    duration: float,
    step: float,
    seek: Optional[float],
    video_format: str = "hls",
) -> List[str]:
    cfg = load_config()
    sink = LoggingEventSink()
    engines: List[MarkerMemoryEngine] = []

    def _factory(options: PlayerOptions) -> MarkerMemoryEngine:
        engine = MarkerMemoryEngine(options, duration=duration)
        engines.append(engine)
        return engine

    host = PlayerHost(engine_factory=_factory, fetch=make_fetcher(cfg), sink=sink)
    props = PlayerProps(
        sources=samples.VIDEO_SOURCES[video_format],
        options=PlayerOptions(title=f"{video_format.upper()} Video Stream - Big Buck Bunny", height="500px", poster=samples.POSTER),
        chapters=chapter_list,
        captions=captions,
    )
    session = host.mount(props)
    if session is None:
        return []

    engine = engines[-1]
    lines: List[str] = []
    session.tracker.subscribe(
        lambda c: lines.append(f"{engine.current_time():8.2f}s  {c.title if c else '-'}")
    )

    engine.mark_ready()
    if session.caption_task is not None:
        report = await session.caption_task
        lines.append(f"captions attached={len(report.attached)} failed={len(report.failed)}")

    if seek is not None:
        session.seek(seek)
    while engine.current_time() < duration:
        engine.advance(step)
        await asyncio.sleep(0)

    host.unmount()
    return lines


@app.command()
def demo(
    video_format: str = typer.Option("hls", "--format", help="Sample stream: hls or mpd"),
    chapters: Optional[Path] = typer.Option(None, help="Chapters JSON; default: sample chapters"),
    caption: List[str] = typer.Option([], help="Caption .srt location (repeatable); first one is default"),
    duration: float = typer.Option(320.0, help="Simulated playback length (seconds)"),
    step: float = typer.Option(5.0, help="Seconds between timeupdate events"),
    seek: Optional[float] = typer.Option(None, help="Seek here before playing"),
    log_level: str = typer.Option("WARNING", help="Log level for session events"),
):
    """Drive a headless session over the chapter list and print chapter changes."""
    if step <= 0:
        raise typer.BadParameter("step must be positive")
    if video_format not in samples.VIDEO_SOURCES:
        raise typer.BadParameter(f"format must be one of: {', '.join(samples.VIDEO_SOURCES)}")
    configure_logging(console_level=parse_level(log_level, logging.WARNING))

    specs = [
        CaptionSpec(src=loc, srclang="und", label=Path(loc).stem or f"track {i}")
        for i, loc in enumerate(caption)
    ]
    lines = asyncio.run(
        _run_demo(chapter_list=_load_chapters(chapters), captions=specs, duration=duration, step=step, seek=seek, video_format=video_format)
    )
    for ln in lines:
        typer.echo(ln)


if __name__ == "__main__":
    app()
