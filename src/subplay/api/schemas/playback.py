from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from subplay.core_types import Chapter


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    request_id: str = ""


class ErrorResponse(BaseModel):
    error: ErrorBody


class ConvertRequest(BaseModel):
    # Exactly one of text/src.
    text: Optional[str] = Field(None, description="SRT caption text to convert")
    src: Optional[str] = Field(None, description="Caption URL, or an absolute file path under the allowed roots, to fetch and convert")


class ConvertResponse(BaseModel):
    ok: bool
    vtt: str
    mime_type: str = "text/vtt"
    meta: Dict[str, Any] = Field(default_factory=dict)


class ActiveChapterRequest(BaseModel):
    chapters: List[Chapter] = Field(default_factory=list, description="Chapters ordered by start time")
    time: float = Field(..., description="Current playback position in seconds")


class ActiveChapterResponse(BaseModel):
    ok: bool
    index: Optional[int] = None
    chapter: Optional[Chapter] = None
