from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Tuple

PreloadPolicy = Literal["auto", "metadata", "none"]


@dataclass(frozen=True)
class PlayerOptions:
    # Display
    title: str = "Video Player"
    width: str = "100%"
    height: str = "400px"
    fluid: bool = True
    responsive: bool = True

    # Behavior
    controls: bool = True
    autoplay: bool = False
    preload: PreloadPolicy = "metadata"
    poster: Optional[str] = None
    playback_rates: Tuple[float, ...] = (0.5, 1, 1.25, 1.5, 2)

    def engine_settings(self) -> Dict[str, Any]:
        """Initial configuration handed to the engine factory."""
        return {
            "controls": self.controls,
            "autoplay": self.autoplay,
            "preload": self.preload,
            "width": self.width,
            "height": self.height,
            "poster": self.poster,
            "fluid": self.fluid,
            "responsive": self.responsive,
            "playbackRates": list(self.playback_rates),
        }


@dataclass(frozen=True)
class MarkerStyle:
    width: str = "10px"
    background_color: str = "#FF6B6B"
    border_radius: str = "2px"
    opacity: str = "0.8"

    # Tip shows the chapter title; the break overlay stays off.
    tip_display: bool = True
    break_overlay_display: bool = False

    def as_plugin_options(self) -> Dict[str, Any]:
        return {
            "markerStyle": {
                "width": self.width,
                "background-color": self.background_color,
                "border-radius": self.border_radius,
                "opacity": self.opacity,
            },
            "markerTip": {"display": self.tip_display},
            "breakOverlay": {"display": self.break_overlay_display},
        }


DEFAULT_MARKER_STYLE = MarkerStyle()


@dataclass(frozen=True)
class LoadReport:
    """Outcome of one caption loading run (indices refer to the input order)."""

    attached: list[int] = field(default_factory=list)
    failed: list[Tuple[int, str]] = field(default_factory=list)
    abandoned: bool = False


__all__ = [
    "PreloadPolicy",
    "PlayerOptions",
    "MarkerStyle",
    "DEFAULT_MARKER_STYLE",
    "LoadReport",
]
