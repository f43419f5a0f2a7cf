from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence, Tuple

from subplay.core_types import Chapter

ChapterListener = Callable[[Optional[Chapter]], None]


def active_chapter(chapters: Sequence[Chapter], current_time: float) -> Optional[Chapter]:
    """
    Chapter playing at current_time.

    - empty list -> None
    - latest chapter with start_time <= current_time; on equal start times
      the later entry wins
    - current_time before every chapter -> the first chapter
    The list is taken as given; it is not sorted or validated here.
    """
    if not chapters:
        return None
    for chapter in reversed(chapters):
        if chapter.start_time <= current_time:
            return chapter
    return chapters[0]


class ChapterTracker:
    """
    Holds the derived "current chapter" for one session.

    update() recomputes from scratch on every time sample (timeupdate,
    seeking and seeked all go through it) and notifies listeners only when
    the active chapter changes.
    """

    def __init__(self, chapters: Sequence[Chapter] = ()) -> None:
        self.chapters: Tuple[Chapter, ...] = tuple(chapters)
        self._current: Optional[Chapter] = None
        self._listeners: List[ChapterListener] = []

    @property
    def current(self) -> Optional[Chapter]:
        return self._current

    def update(self, current_time: Optional[float]) -> Optional[Chapter]:
        if not self.chapters:
            return self._current
        # A missing or non-finite sample keeps the stale value.
        if current_time is None or not math.isfinite(current_time):
            return self._current

        found = active_chapter(self.chapters, current_time)
        if found is not self._current:
            self._current = found
            for listener in list(self._listeners):
                listener(found)
        return found

    def subscribe(self, listener: ChapterListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def clear_listeners(self) -> None:
        self._listeners.clear()


__all__ = ["ChapterListener", "ChapterTracker", "active_chapter"]
