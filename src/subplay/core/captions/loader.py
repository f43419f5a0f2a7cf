from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from subplay.core.captions.convert import VTT_MIME_TYPE, decode_caption_bytes, srt_to_vtt
from subplay.core.captions.fetch import Fetcher
from subplay.core.contracts import LoadReport
from subplay.core.errors import FetchFailure
from subplay.core.events import EventSink, NullEventSink
from subplay.core.resources.ledger import ResourceLedger
from subplay.core_types import CaptionSpec

# attach(spec, resolved_location, is_default)
AttachFn = Callable[[CaptionSpec, str, bool], None]


def _always_live() -> bool:
    return True


class CaptionLoader:
    """
    Fetch -> convert -> register -> attach, one caption at a time.

    Specs run strictly in input order; the next fetch starts only after the
    previous caption is attached or skipped. A failed caption is reported and
    skipped, it never aborts the rest of the run.
    """

    def __init__(
        self,
        *,
        fetch: Fetcher,
        ledger: ResourceLedger,
        convert: Callable[[str], str] = srt_to_vtt,
        is_live: Callable[[], bool] = _always_live,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.fetch = fetch
        self.ledger = ledger
        self.convert = convert
        self.is_live = is_live
        self.sink = sink or NullEventSink()

    async def load(self, specs: Sequence[CaptionSpec], attach: AttachFn) -> LoadReport:
        attached: List[int] = []
        failed: List[Tuple[int, str]] = []

        for index, spec in enumerate(specs):
            self.sink.emit("CAPTION_CONVERTING", index=index, label=spec.label)
            try:
                raw = await self.fetch(spec.src)
            except FetchFailure as e:
                self.sink.emit("CAPTION_FETCH_FAILED", index=index, label=spec.label, reason=e.reason)
                failed.append((index, e.reason))
                continue
            except Exception as e:
                reason = f"{type(e).__name__}: {e}"
                self.sink.emit("CAPTION_FETCH_FAILED", index=index, label=spec.label, reason=reason)
                failed.append((index, reason))
                continue

            # The owning session may have been disposed while we were suspended.
            # Nothing below awaits, so this check also covers the attach.
            if not self.is_live():
                self.sink.emit("CAPTION_LOAD_ABANDONED", index=index, remaining=len(specs) - index)
                return LoadReport(attached=attached, failed=failed, abandoned=True)

            vtt = self.convert(decode_caption_bytes(raw))
            handle = self.ledger.register(vtt, VTT_MIME_TYPE)
            self.sink.emit("CAPTION_CONVERTED", index=index, label=spec.label, url=handle.url)

            is_default = spec.default or index == 0
            try:
                attach(spec, handle.url, is_default)
            except Exception as e:
                reason = f"{type(e).__name__}: {e}"
                self.sink.emit("CAPTION_ATTACH_FAILED", index=index, label=spec.label, reason=reason)
                failed.append((index, reason))
                continue
            attached.append(index)

        self.sink.emit("CAPTIONS_ADDED", total=len(specs), attached=len(attached))
        return LoadReport(attached=attached, failed=failed)


__all__ = ["AttachFn", "CaptionLoader"]
