"""Local identifier assignment."""

from __future__ import annotations

import time
from collections.abc import Callable


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class LocalIdAssigner:
    """Hands out local record ids.

    Ids are millisecond timestamps rendered as decimal strings.  When the
    clock has not moved since the previous call (or went backwards) the
    last id is bumped by one, so ids from one assigner are unique and
    strictly increasing.  They are not meant to be unique across devices;
    the server-assigned remote id plays that role after a sync.
    """

    def __init__(self, *, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._last: int | None = None

    def next_id(self) -> str:
        candidate = self._clock()
        if self._last is not None and candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)
