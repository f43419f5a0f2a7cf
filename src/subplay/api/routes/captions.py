# src/subplay/api/routes/captions.py
from __future__ import annotations

from typing import Optional
from urllib.parse import unquote, urlparse

from fastapi import APIRouter

from subplay.api.errors import CaptionFetchError, InvalidRequestError
from subplay.api.schemas.playback import ConvertRequest, ConvertResponse, ErrorResponse
from subplay.api.utils.path_policy import get_path_policy
from subplay.config import load_config
from subplay.core.captions.convert import VTT_MIME_TYPE, decode_caption_bytes, srt_to_vtt
from subplay.core.captions.fetch import make_fetcher, resolve_location
from subplay.core.errors import FetchFailure

router = APIRouter(prefix="/v1/captions", tags=["captions"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def _checked_location(src: str, base_url: Optional[str]) -> str:
    """
    Remote URLs pass through; anything that reads the local disk must be
    a file under the configured allowed roots.
    """
    try:
        loc = resolve_location(src, base_url)
    except FetchFailure as e:
        raise InvalidRequestError(e.reason, details={"src": src}) from e

    parsed = urlparse(loc)
    scheme = parsed.scheme.lower()
    if scheme in ("http", "https"):
        return loc
    if scheme == "file":
        return get_path_policy().ensure_file_exists(unquote(parsed.path))
    if scheme == "" or len(scheme) == 1:
        return get_path_policy().ensure_file_exists(loc)
    raise InvalidRequestError(f"unsupported scheme: {scheme}", details={"src": src})


@router.post("/convert", response_model=ConvertResponse, responses=_ERROR_RESPONSES)
async def convert(req: ConvertRequest) -> ConvertResponse:
    if (req.text is None) == (req.src is None):
        raise InvalidRequestError("exactly one of text or src is required", details={"fields": ["text", "src"]})

    if req.src is not None:
        cfg = load_config()
        location = _checked_location(req.src, cfg.caption_base_url)
        fetch = make_fetcher(cfg)
        try:
            raw = await fetch(location)
        except FetchFailure as e:
            raise CaptionFetchError(e.reason, details={"src": e.location}) from e
        source = decode_caption_bytes(raw)
    else:
        source = req.text or ""

    vtt = srt_to_vtt(source)
    return ConvertResponse(
        ok=True,
        vtt=vtt,
        mime_type=VTT_MIME_TYPE,
        meta={"source_chars": len(source), "vtt_chars": len(vtt)},
    )
