# src/subplay/api/routes/__init__.py
from __future__ import annotations

from fastapi import APIRouter

# Root router to be included by app.py
api_router = APIRouter()

from subplay.api.routes.health import router as health_router  # noqa: E402
from subplay.api.routes.captions import router as captions_router  # noqa: E402
from subplay.api.routes.chapters import router as chapters_router  # noqa: E402

api_router.include_router(health_router)
api_router.include_router(captions_router)
api_router.include_router(chapters_router)
