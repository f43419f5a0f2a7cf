from __future__ import annotations

from subplay.core.captions.convert import srt_to_vtt
from subplay.core.captions.loader import CaptionLoader
from subplay.core.chapters.tracker import ChapterTracker, active_chapter
from subplay.core.resources.ledger import BlobStore, ResourceHandle, ResourceLedger
from subplay.core.session import PlaybackSession, PlayerHost, PlayerProps, SessionState

__all__ = [
    "srt_to_vtt",
    "CaptionLoader",
    "ChapterTracker",
    "active_chapter",
    "BlobStore",
    "ResourceHandle",
    "ResourceLedger",
    "PlaybackSession",
    "PlayerHost",
    "PlayerProps",
    "SessionState",
]
