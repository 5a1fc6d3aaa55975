"""Shared test helpers.

``FakeScheduler`` stands in for the event loop so debounce timing can be
driven by hand; ``RecordingBackend`` counts writes per key.
"""

from __future__ import annotations

import heapq
import itertools
from collections import Counter
from typing import Callable, List, Mapping

from slidesync.errors import StorageUnavailableError
from slidesync.storage import MemoryBackend


class FakeHandle:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock implementing the ``Scheduler`` protocol."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self._queue: List[tuple[float, int, FakeHandle]] = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every timer that comes due."""

        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            handle.callback()
        self.now = target

    def run_all(self) -> None:
        while self.pending:
            upcoming = min(when for when, _, handle in self._queue if not handle.cancelled)
            self.advance(upcoming - self.now)


class RecordingBackend(MemoryBackend):
    """Memory backend that records every successful write."""

    def __init__(self, initial: Mapping[str, str] | None = None, **kwargs) -> None:
        super().__init__(initial, **kwargs)
        self.writes: List[tuple[str, str]] = []

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, value)
        self.writes.append((key, value))

    def write_counts(self) -> Counter:
        return Counter(key for key, _ in self.writes)

    def reset_writes(self) -> None:
        self.writes.clear()


class FailingWritesBackend(MemoryBackend):
    """Reads work, every write raises."""

    def set_item(self, key: str, value: str) -> None:
        raise StorageUnavailableError("Storage quota exceeded", key=key, operation="set")
