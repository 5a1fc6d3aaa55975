"""Event bus used to broadcast theme state to independent consumers.

Handlers registered as bound methods are held through weak references, so a
consumer that is garbage collected without unsubscribing simply drops out of
the broadcast list.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, Generic, TypeVar
from weakref import WeakMethod

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all theme events."""


@dataclass(slots=True)
class ThemeChanged(Event):
    """Emitted when the canonical theme for a mode changes.

    Attributes:
        mode: Mode value (``"single"`` or ``"presentation"``).
        theme_id: The new canonical theme id.
        previous_id: The id it replaced, or None on first assignment.
        source: Free-form label describing who asked for the change.
        origin: The object that performed the write, used by coordinators
            to ignore their own echoes.
    """

    mode: str
    theme_id: str
    previous_id: str | None = None
    source: str | None = None
    origin: Any = None


@dataclass(slots=True)
class SyncStatusChanged(Event):
    """Emitted whenever a coordinator's sync status transitions.

    Attributes:
        coordinator_id: Identifier of the reporting coordinator.
        mode: Mode the coordinator is attached to.
        status: New status value.
        error: Current error message, if any.
    """

    coordinator_id: str
    mode: str
    status: str
    error: str | None = None


@dataclass(slots=True)
class ThemeStorageMigrated(Event):
    """Emitted once at startup after legacy storage keys were folded in."""

    migrated: dict[str, str]
    removed: list[str]
    conflicts: int = 0


class EventBus(Generic[E]):
    """Synchronous typed publish/subscribe bus.

    Not thread-safe: every call is expected on the event-loop thread.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: DefaultDict[type[Event], list[_HandlerRef]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Register ``handler`` for ``event_type`` (and its subclasses)."""

        self._handlers[event_type].append(_HandlerRef.create(handler))
        logger.debug(
            "Subscribed handler %s to event type %s",
            _handler_name(handler),
            event_type.__name__,
        )

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Remove the first registration of ``handler``; unknown handlers are ignored."""

        handlers = self._handlers.get(event_type)
        if not handlers:
            return
        for i, handler_ref in enumerate(handlers):
            if handler_ref.matches(handler):
                handlers.pop(i)
                logger.debug(
                    "Unsubscribed handler %s from event type %s",
                    _handler_name(handler),
                    event_type.__name__,
                )
                return

    def publish(self, event: Event) -> None:
        """Invoke every live handler registered for the event's type.

        A handler that raises is logged and the remaining handlers still run.
        """

        targets: list[tuple[type[Event], _HandlerRef]] = []
        for event_type, handlers in self._handlers.items():
            if isinstance(event, event_type):
                targets.extend((event_type, handler_ref) for handler_ref in handlers)
        if not targets:
            logger.debug("No handlers for event type %s", type(event).__name__)
            return

        for event_type, handler_ref in targets:
            handler = handler_ref.resolve()
            if handler is None:
                self._discard(event_type, handler_ref)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s raised exception for event %s",
                    _handler_name(handler),
                    type(event).__name__,
                )

    def clear(self) -> None:
        self._handlers.clear()
        logger.debug("Cleared all event handlers")

    def handler_count(self, event_type: type[Event] | None = None) -> int:
        if event_type is not None:
            return sum(1 for ref in self._handlers.get(event_type, []) if ref.resolve() is not None)
        return sum(
            1 for handlers in self._handlers.values() for ref in handlers if ref.resolve() is not None
        )

    def _discard(self, event_type: type[Event], handler_ref: "_HandlerRef") -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler_ref in handlers:
            handlers.remove(handler_ref)


class _HandlerRef:
    """Weak reference for bound methods, strong reference for plain callables."""

    __slots__ = ("_ref", "_is_weak")

    def __init__(self, handler_ref: WeakMethod | Handler, is_weak: bool) -> None:
        self._ref = handler_ref
        self._is_weak = is_weak

    @classmethod
    def create(cls, handler: Handler) -> "_HandlerRef":
        if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
            try:
                return cls(WeakMethod(handler), is_weak=True)  # type: ignore[arg-type]
            except TypeError:
                pass
        return cls(handler, is_weak=False)

    def resolve(self) -> Handler | None:
        if not self._is_weak:
            return self._ref  # type: ignore[return-value]
        return self._ref()  # type: ignore[operator]

    def matches(self, handler: Handler) -> bool:
        resolved = self.resolve()
        if resolved is None:
            return False
        return resolved == handler


def _handler_name(handler: Handler) -> str:
    if hasattr(handler, "__self__") and hasattr(handler, "__func__"):
        return f"{type(handler.__self__).__name__}.{handler.__func__.__name__}"
    if hasattr(handler, "__name__"):
        return handler.__name__
    return repr(handler)


__all__ = [
    "Event",
    "EventBus",
    "Handler",
    "SyncStatusChanged",
    "ThemeChanged",
    "ThemeStorageMigrated",
]
