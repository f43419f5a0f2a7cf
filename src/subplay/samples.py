from __future__ import annotations

from typing import Dict, List

from subplay.core_types import Chapter, SourceDescriptor

POSTER = (
    "https://upload.wikimedia.org/wikipedia/commons/thumb/c/c5/"
    "Big_buck_bunny_poster_big.jpg/320px-Big_buck_bunny_poster_big.jpg"
)

VIDEO_SOURCES: Dict[str, List[SourceDescriptor]] = {
    "hls": [
        SourceDescriptor(
            src="https://test-streams.mux.dev/x36xhzz/x36xhzz.m3u8",
            type="application/x-mpegURL",
            label="HLS - Big Buck Bunny",
        )
    ],
    "mpd": [
        SourceDescriptor(
            src="https://dash.akamaized.net/akamai/bbb_30fps/bbb_30fps.mpd",
            type="application/dash+xml",
            label="DASH/MPD - Big Buck Bunny",
        )
    ],
}

CHAPTERS: List[Chapter] = [
    Chapter(time=0, title="Opening Credits", description="The story begins with our hero Big Buck Bunny"),
    Chapter(time=30, title="Meeting the Characters", description="Introduction to the woodland creatures"),
    Chapter(time=90, title="The Conflict", description="Trouble starts in the peaceful forest"),
    Chapter(time=150, title="The Chase", description="Action-packed sequence through the forest"),
    Chapter(time=240, title="Resolution", description="How our hero saves the day"),
    Chapter(time=300, title="Ending Credits", description="The story concludes with a happy ending"),
]
