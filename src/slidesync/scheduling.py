"""Timer scheduling and debounce helpers.

Coordinators never touch an event loop directly; they receive a
:class:`Scheduler`, which is an asyncio loop in production and a manual
clock in tests.
"""

from __future__ import annotations

import asyncio
import logging
import warnings
from typing import Callable, Protocol

__all__ = ["Debouncer", "LoopScheduler", "Scheduler", "TimerHandle"]

LOGGER = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Cancellable handle returned by :meth:`Scheduler.call_later`."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Minimal timer interface shared by asyncio loops and test clocks."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def time(self) -> float:
        ...


class LoopScheduler:
    """Adapts an asyncio event loop to :class:`Scheduler`.

    The loop is looked up lazily so coordinators can be built before the
    host starts its loop. Without a running loop the thread's current loop
    is used (the one :func:`slidesync.qt.create_qt_loop` installs); when the
    thread has none, a new loop is installed for the host to run later.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = _current_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)

    def time(self) -> float:
        return self.loop.time()


def _current_loop() -> asyncio.AbstractEventLoop:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        pass
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DeprecationWarning)
        try:
            loop = asyncio.get_event_loop()
        except RuntimeError:
            loop = None
    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        LOGGER.debug("No event loop set for this thread; installed a new one")
    return loop


class Debouncer:
    """Runs ``callback`` once ``delay`` seconds after the last :meth:`trigger`."""

    def __init__(
        self,
        scheduler: Scheduler,
        delay: float,
        callback: Callable[[], None],
        *,
        name: str = "debounce",
    ) -> None:
        self._scheduler = scheduler
        self._delay = max(0.0, float(delay))
        self._callback = callback
        self._name = name
        self._handle: TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """Arm the timer, cancelling any pending one."""

        if self._handle is not None:
            self._handle.cancel()
            LOGGER.debug("%s re-armed", self._name)
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def cancel(self) -> bool:
        """Drop the pending call. Returns True if one was pending."""

        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def flush(self) -> bool:
        """Run a pending call right now. Returns True if one was pending."""

        if not self.cancel():
            return False
        self._callback()
        return True

    def _fire(self) -> None:
        self._handle = None
        self._callback()
