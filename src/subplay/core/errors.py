from __future__ import annotations

from typing import Optional


class SubplayError(Exception):
    """Base class for playback-control errors."""


class FetchFailure(SubplayError):
    """A caption file could not be read. Non-fatal: the caption is skipped."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"{location}: {reason}")
        self.location = location
        self.reason = reason


class EngineError(SubplayError):
    """Reported by (or about) the playback engine itself."""

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code


class EngineDisposedError(EngineError):
    def __init__(self, operation: str) -> None:
        super().__init__(f"engine already disposed (operation={operation})", code="disposed")
        self.operation = operation


class SessionStateError(SubplayError):
    """Illegal playback-session transition."""
