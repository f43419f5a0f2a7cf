from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from subplay.api.errors import InvalidRequestError, NotFoundError
from subplay.config import load_config


def _clean(p: str) -> str:
    if "\x00" in p:
        raise InvalidRequestError("caption path contains null byte", details={"src": p})
    return p.strip().strip('"').strip("'")


def _under(resolved: Path, root: Path) -> bool:
    try:
        return Path(os.path.commonpath([str(resolved), str(root)])) == root
    except ValueError:
        # different drives, or a mix of absolute and relative paths
        return False


@dataclass(frozen=True)
class PathPolicy:
    """
    Which local caption files the HTTP service may read.

    A path must be absolute, free of "." / ".." segments and resolve
    (symlinks included) under one of allowed_roots.
    """

    allowed_roots: Tuple[Path, ...]

    def ensure_allowed(self, p: str) -> str:
        if not isinstance(p, str) or not p.strip():
            raise InvalidRequestError("caption path is empty")
        original = _clean(p)
        pp = Path(original)

        if not pp.is_absolute():
            raise InvalidRequestError("caption path must be absolute", details={"src": original})
        if any(part in (".", "..") for part in pp.parts):
            raise InvalidRequestError("caption path contains '.' or '..' segments", details={"src": original})

        resolved = pp.resolve(strict=False)
        if not any(_under(resolved, root) for root in self.allowed_roots):
            raise InvalidRequestError(
                "caption path must be under allowed_roots",
                details={"src": original, "allowed_roots": [str(r) for r in self.allowed_roots]},
            )
        return str(resolved)

    def ensure_file_exists(self, p: str) -> str:
        ap = self.ensure_allowed(p)
        path = Path(ap)
        if not path.exists():
            raise NotFoundError("caption file does not exist", details={"src": ap})
        if not path.is_file():
            raise InvalidRequestError("caption path is not a file", details={"src": ap})
        return ap


def get_path_policy(allowed_roots: Optional[Iterable[str]] = None) -> PathPolicy:
    cfg = load_config()
    roots = list(allowed_roots) if allowed_roots else list(cfg.allowed_roots)
    if not roots:
        roots = [cfg.data_root]

    resolved = []
    for r in roots:
        rp = Path(_clean(r))
        if not rp.is_absolute():
            raise InvalidRequestError("allowed root must be absolute", details={"root": str(rp)})
        resolved.append(rp.resolve(strict=False))
    return PathPolicy(allowed_roots=tuple(resolved))
