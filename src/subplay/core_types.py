from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

CaptionKind = Literal["subtitles", "captions", "descriptions", "chapters", "metadata"]


class SourceDescriptor(BaseModel):
    src: str
    type: str
    label: Optional[str] = None

    model_config = {"frozen": True}


class CaptionSpec(BaseModel):
    """
    One caption track to fetch, convert and attach.

    Order in the input sequence matters: index 0 is attached as default
    when it does not set `default` itself.
    """

    src: str
    kind: CaptionKind = "subtitles"
    srclang: str
    label: str
    default: bool = False

    model_config = {"frozen": True}


class Chapter(BaseModel):
    # "time" is the wire name used by chapter lists and the marker plugin
    start_time: float = Field(..., ge=0, alias="time")
    title: str
    description: Optional[str] = None

    model_config = {"frozen": True, "populate_by_name": True}


class TextTrackDescriptor(BaseModel):
    kind: CaptionKind
    src: str
    srclang: str
    label: str
    default: bool = False
