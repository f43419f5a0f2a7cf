from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from subplay.utils.logger import get_logger

# Events that indicate a degraded but running session.
WARNING_EVENTS = frozenset(
    {
        "CAPTION_FETCH_FAILED",
        "CAPTION_ATTACH_FAILED",
        "CAPTION_ATTACH_DROPPED",
        "CAPTION_LOAD_ABANDONED",
        "CAPTION_LOAD_DEFERRED",
        "ENGINE_DISPOSE_FAILED",
        "RESOURCE_RELEASE_FAILED",
    }
)
ERROR_EVENTS = frozenset({"ENGINE_ERROR"})


class EventSink(Protocol):
    """
    Observability boundary for the core.

    Core components never log directly; they emit named events with
    structured fields and the sink decides where they go.
    """

    def emit(self, event: str, **fields: Any) -> None: ...


def _render(event: str, fields: dict[str, Any]) -> str:
    if not fields:
        return event
    inner = " ".join(f"{k}={v}" for k, v in fields.items())
    return f"{event} {inner}"


class LoggingEventSink:
    """Writes events as `EVENT key=value ...` lines to a stdlib logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or get_logger("subplay")

    def emit(self, event: str, **fields: Any) -> None:
        if event in ERROR_EVENTS:
            level = logging.ERROR
        elif event in WARNING_EVENTS:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.logger.log(level, _render(event, fields))


class NullEventSink:
    def emit(self, event: str, **fields: Any) -> None:
        return None


__all__ = ["EventSink", "LoggingEventSink", "NullEventSink", "WARNING_EVENTS", "ERROR_EVENTS"]
