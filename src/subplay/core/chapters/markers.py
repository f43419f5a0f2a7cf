from __future__ import annotations

from typing import Any, Dict, List, Sequence

from subplay.core.contracts import DEFAULT_MARKER_STYLE, MarkerStyle
from subplay.core_types import Chapter


def chapter_markers(chapters: Sequence[Chapter]) -> List[Dict[str, Any]]:
    return [{"time": c.start_time, "text": c.title, "overlayText": c.title} for c in chapters]


def marker_plugin_options(chapters: Sequence[Chapter], style: MarkerStyle = DEFAULT_MARKER_STYLE) -> Dict[str, Any]:
    opts = style.as_plugin_options()
    opts["markers"] = chapter_markers(chapters)
    return opts


__all__ = ["chapter_markers", "marker_plugin_options"]
