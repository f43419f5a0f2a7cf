from __future__ import annotations

import re

VTT_HEADER = "WEBVTT"
VTT_MIME_TYPE = "text/vtt"

_BOM = "\ufeff"
# Only the fractional-seconds separator changes: 00:01:02,500 -> 00:01:02.500
_SRT_TIMESTAMP_RE = re.compile(r"(\d{2}:\d{2}:\d{2}),(\d{3})")
# Cue index lines ("12\n"). \s* also eats a trailing "\r" from CRLF files and any
# blank lines after the number. A cue whose text is only a number therefore loses
# that text and the blank line after it, and runs into the next cue.
_INDEX_LINE_RE = re.compile(r"^\d+\s*\n", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def srt_to_vtt(srt_text: str) -> str:
    """
    Convert SRT caption text to WebVTT.

    Never raises: malformed input still yields a header-prefixed document,
    since WebVTT players skip blocks they cannot parse.

    Steps (order matters):
    1) strip a leading BOM
    2) rewrite HH:MM:SS,mmm -> HH:MM:SS.mmm
    3) drop lines holding only a cue number
    4) collapse 3+ newlines into one blank line
    5) trim, then prepend the "WEBVTT" header and a blank line
    """
    text = srt_text
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    text = _SRT_TIMESTAMP_RE.sub(r"\1.\2", text)
    text = _INDEX_LINE_RE.sub("", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)

    return f"{VTT_HEADER}\n\n{text.strip()}"


def decode_caption_bytes(data: bytes | str, encoding: str = "utf-8") -> str:
    if isinstance(data, str):
        return data
    return data.decode(encoding, errors="replace")


__all__ = ["srt_to_vtt", "decode_caption_bytes", "VTT_HEADER", "VTT_MIME_TYPE"]
