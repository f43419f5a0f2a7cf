from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Optional
from urllib.parse import unquote, urljoin, urlparse

import requests

from subplay.config import SubplayConfig, load_config
from subplay.core.errors import FetchFailure

Fetcher = Callable[[str], Awaitable[bytes]]

_HTTP_SCHEMES = ("http", "https")


def resolve_location(location: str, base_url: Optional[str] = None) -> str:
    """
    Resolve a caption location against base_url.

    Absolute URLs are returned untouched; relative ones (e.g. "/captions-en.srt")
    are joined onto base_url when one is configured.
    """
    loc = (location or "").strip()
    if not loc:
        raise FetchFailure(location, "empty caption location")
    if urlparse(loc).scheme or not base_url:
        return loc
    return urljoin(base_url, loc)


def _http_get(url: str, timeout: float) -> bytes:
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchFailure(url, f"{type(e).__name__}: {e}") from e
    if not resp.ok:
        raise FetchFailure(url, f"Failed to fetch caption file: {resp.status_code} {resp.reason}")
    return resp.content


def _read_file(location: str) -> bytes:
    parsed = urlparse(location)
    path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(location)
    try:
        return path.expanduser().read_bytes()
    except OSError as e:
        raise FetchFailure(location, f"{type(e).__name__}: {e}") from e


async def fetch_bytes(location: str, *, timeout: float = 15.0, base_url: Optional[str] = None) -> bytes:
    """
    Read raw caption bytes from an http(s) URL, a file:// URI or a local path.

    Blocking I/O runs in a worker thread so the event loop keeps serving
    timing events while a caption downloads. Every failure surfaces as FetchFailure.
    """
    url = resolve_location(location, base_url)
    scheme = urlparse(url).scheme.lower()
    if scheme in _HTTP_SCHEMES:
        return await asyncio.to_thread(_http_get, url, timeout)
    if scheme in ("", "file") or len(scheme) == 1:
        # single-letter scheme: a Windows drive path such as C:\captions\en.srt
        return await asyncio.to_thread(_read_file, url)
    raise FetchFailure(url, f"unsupported scheme: {scheme}")


def make_fetcher(cfg: Optional[SubplayConfig] = None) -> Fetcher:
    cfg = cfg or load_config()

    async def _fetch(location: str) -> bytes:
        return await fetch_bytes(location, timeout=cfg.fetch_timeout_sec, base_url=cfg.caption_base_url)

    return _fetch


__all__ = ["Fetcher", "fetch_bytes", "make_fetcher", "resolve_location"]
