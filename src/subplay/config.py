from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


def _opt(v: str) -> Optional[str]:
    v = (v or "").strip()
    return v or None


def _split_csv(v: str) -> List[str]:
    parts = [p.strip() for p in (v or "").split(",")]
    return [p for p in parts if p]


@dataclass(frozen=True)
class SubplayConfig:
    """
    Runtime config (env-driven).

    Shared by the CLI, the HTTP service and the default caption fetcher.
    """

    # Logging
    log_level: str = os.getenv("SUBPLAY_LOG_LEVEL", "INFO")
    log_path: str = os.getenv("SUBPLAY_LOG_PATH", "")

    # Caption fetch
    fetch_timeout_sec: float = float(os.getenv("SUBPLAY_FETCH_TIMEOUT_SEC", "15"))
    # Relative caption locations (e.g. "/captions-en.srt") resolve against this.
    caption_base_url: Optional[str] = _opt(os.getenv("SUBPLAY_CAPTION_BASE_URL", ""))

    # Local caption files the HTTP service may read. If empty -> [data_root].
    # Example: SUBPLAY_ALLOWED_ROOTS="/data,/mnt/captions"
    data_root: str = os.getenv("SUBPLAY_DATA_ROOT", "/data")
    allowed_roots: List[str] = None  # type: ignore[assignment]

    # HTTP service
    api_host: str = os.getenv("SUBPLAY_API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("SUBPLAY_API_PORT", "8000"))

    def __post_init__(self) -> None:
        if self.allowed_roots is not None:
            object.__setattr__(self, "allowed_roots", list(self.allowed_roots))
            return
        roots_env = os.getenv("SUBPLAY_ALLOWED_ROOTS", "").strip()
        roots = _split_csv(roots_env) if roots_env else [self.data_root]
        object.__setattr__(self, "allowed_roots", roots)


def load_config() -> SubplayConfig:
    return SubplayConfig()
