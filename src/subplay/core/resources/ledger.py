from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple

from subplay.core.events import EventSink, NullEventSink


@dataclass(frozen=True)
class ResourceHandle:
    url: str
    mime_type: str
    size: int


class ResourceAllocator(Protocol):
    """
    Process-wide "create address for bytes" / "release address" pair
    (the blob-URL primitive of a browser).
    """

    def create(self, data: bytes, mime_type: str) -> str: ...

    def release(self, url: str) -> None: ...


class BlobStore:
    """
    In-process allocator.

    Addresses look like blob:subplay/<hex> and stay resolvable until released.
    """

    scheme = "blob:subplay/"

    def __init__(self) -> None:
        self._blobs: Dict[str, Tuple[bytes, str]] = {}

    def create(self, data: bytes, mime_type: str) -> str:
        url = f"{self.scheme}{uuid.uuid4().hex}"
        self._blobs[url] = (bytes(data), mime_type)
        return url

    def release(self, url: str) -> None:
        # releasing an unknown address is a no-op, like revokeObjectURL
        self._blobs.pop(url, None)

    def resolve(self, url: str) -> bytes:
        try:
            return self._blobs[url][0]
        except KeyError:
            raise KeyError(f"blob not found or already released: {url}") from None

    def mime_type(self, url: str) -> Optional[str]:
        entry = self._blobs.get(url)
        return entry[1] if entry else None

    @property
    def live_count(self) -> int:
        return len(self._blobs)


class ResourceLedger:
    """
    Tracks every handle created for converted captions during one session.

    Handles are append-only: never deduplicated, never released one by one.
    release_all() drains them together and is a no-op on an empty ledger.
    """

    def __init__(self, allocator: ResourceAllocator, *, sink: Optional[EventSink] = None) -> None:
        self.allocator = allocator
        self.sink = sink or NullEventSink()
        self._handles: List[ResourceHandle] = []

    def register(self, data: bytes | str, mime_type: str) -> ResourceHandle:
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        url = self.allocator.create(raw, mime_type)
        handle = ResourceHandle(url=url, mime_type=mime_type, size=len(raw))
        self._handles.append(handle)
        return handle

    def release_all(self) -> int:
        if not self._handles:
            return 0

        handles, self._handles = self._handles, []
        released = 0
        for h in handles:
            try:
                self.allocator.release(h.url)
                released += 1
            except Exception as e:
                self.sink.emit("RESOURCE_RELEASE_FAILED", url=h.url, error=f"{type(e).__name__}: {e}")
        self.sink.emit("RESOURCES_RELEASED", count=released)
        return released

    @property
    def handles(self) -> Tuple[ResourceHandle, ...]:
        return tuple(self._handles)

    def __len__(self) -> int:
        return len(self._handles)


__all__ = ["ResourceHandle", "ResourceAllocator", "BlobStore", "ResourceLedger"]
