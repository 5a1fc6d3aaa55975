"""Process-wide canonical theme state.

This is the only place the authoritative theme selection per mode lives. It
is purely in-memory: coordinators own persistence, the state only validates
and broadcasts.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from .errors import InvalidThemeError
from .events import EventBus, Handler, ThemeChanged
from .partition import Mode
from .theme import ThemeRegistry, default_registry

__all__ = ["CanonicalThemeState", "get_theme_state", "set_theme_state"]

LOGGER = logging.getLogger(__name__)


class CanonicalThemeState:
    """Authoritative ``mode -> theme id`` mapping with change notification."""

    def __init__(
        self,
        registry: ThemeRegistry | None = None,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        self._registry = registry or default_registry()
        self._event_bus: EventBus = event_bus if event_bus is not None else EventBus()
        self._selections: Dict[Mode, str] = {}

    @property
    def registry(self) -> ThemeRegistry:
        return self._registry

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    def get(self, mode: Mode | str) -> str:
        """Return the selection for ``mode``, creating it with the default."""

        key = Mode.coerce(mode)
        theme_id = self._selections.get(key)
        if theme_id is None:
            theme_id = self._registry.default_id
            self._selections[key] = theme_id
        return theme_id

    def peek(self, mode: Mode | str) -> str | None:
        return self._selections.get(Mode.coerce(mode))

    def has(self, mode: Mode | str) -> bool:
        return Mode.coerce(mode) in self._selections

    def set(
        self,
        mode: Mode | str,
        theme_id: str,
        *,
        source: str | None = None,
        origin: Any = None,
    ) -> bool:
        """Make ``theme_id`` canonical for ``mode``.

        Returns True when the value changed. Raises :class:`InvalidThemeError`
        and leaves state untouched when ``theme_id`` is not registered.
        """

        key = Mode.coerce(mode)
        theme = self._registry.require(theme_id)
        previous = self._selections.get(key)
        if previous == theme.id:
            return False
        self._selections[key] = theme.id
        LOGGER.debug(
            "Canonical theme for %s: %s -> %s (source=%s)",
            key.value,
            previous,
            theme.id,
            source,
        )
        self._event_bus.publish(
            ThemeChanged(
                mode=key.value,
                theme_id=theme.id,
                previous_id=previous,
                source=source,
                origin=origin,
            )
        )
        return True

    def subscribe(self, handler: Handler[ThemeChanged]) -> None:
        self._event_bus.subscribe(ThemeChanged, handler)

    def unsubscribe(self, handler: Handler[ThemeChanged]) -> None:
        self._event_bus.unsubscribe(ThemeChanged, handler)

    def snapshot(self) -> Dict[str, str]:
        return {mode.value: theme_id for mode, theme_id in self._selections.items()}

    def reset(self) -> None:
        """Forget every selection; subscribers are kept."""

        self._selections.clear()


_GLOBAL_STATE: CanonicalThemeState | None = None


def get_theme_state() -> CanonicalThemeState:
    global _GLOBAL_STATE
    if _GLOBAL_STATE is None:
        _GLOBAL_STATE = CanonicalThemeState()
    return _GLOBAL_STATE


def set_theme_state(state: CanonicalThemeState | None) -> CanonicalThemeState:
    global _GLOBAL_STATE
    _GLOBAL_STATE = state
    if _GLOBAL_STATE is None:
        _GLOBAL_STATE = CanonicalThemeState()
    return _GLOBAL_STATE
