# src/subplay/api/routes/chapters.py
from __future__ import annotations

import math

from fastapi import APIRouter

from subplay.api.errors import InvalidRequestError
from subplay.api.schemas.playback import ActiveChapterRequest, ActiveChapterResponse, ErrorResponse
from subplay.core.chapters.tracker import active_chapter

router = APIRouter(prefix="/v1/chapters", tags=["chapters"])


@router.post(
    "/active",
    response_model=ActiveChapterResponse,
    responses={400: {"model": ErrorResponse}},
)
def active(req: ActiveChapterRequest) -> ActiveChapterResponse:
    if not math.isfinite(req.time):
        raise InvalidRequestError("time must be a finite number", details={"field": "time"})

    found = active_chapter(req.chapters, req.time)
    if found is None:
        return ActiveChapterResponse(ok=True)

    index = next(i for i, c in enumerate(req.chapters) if c is found)
    return ActiveChapterResponse(ok=True, index=index, chapter=found)
