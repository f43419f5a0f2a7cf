from __future__ import annotations

from fastapi import APIRouter

from subplay import __version__
from subplay.config import load_config

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    """
    Human/debug-friendly health: includes config surface that is safe to expose.
    """
    cfg = load_config()
    return {
        "ok": True,
        "service": "subplay-api",
        "version": __version__,
        "fetch_timeout_sec": cfg.fetch_timeout_sec,
        "caption_base_url": cfg.caption_base_url,
    }


@router.get("/healthz")
def healthz() -> dict:
    return {"ok": True}
