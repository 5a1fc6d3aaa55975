"""Application modes and their storage key-space."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

DEFAULT_STORAGE_PREFIX = "ai-ppt"

# Mode-agnostic keys from releases that predate mode partitioning, in
# preference order. The first one present seeds the fallback key.
LEGACY_THEME_KEYS: Tuple[str, ...] = (
    "selected-theme",
    "ai-ppt-theme",
    "theme-selection",
    "app-theme",
)

_FALLBACK_SLOT = "selected-theme"
# Earlier releases composed keys as "{prefix}-ai-ppt-<slot>".
_DOUBLED_PREFIX = "ai-ppt"


class Mode(str, Enum):
    """Editing context that remembers its own theme."""

    SINGLE = "single"
    PRESENTATION = "presentation"

    @classmethod
    def coerce(cls, value: "Mode | str") -> "Mode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown mode: {value!r}") from exc


_MODE_SLOTS: Dict[Mode, str] = {
    Mode.SINGLE: "single-mode-theme",
    Mode.PRESENTATION: "presentation-theme",
}


@dataclass(frozen=True, slots=True)
class ModePartition:
    """Maps each :class:`Mode` to a stable, non-overlapping storage key."""

    prefix: str = DEFAULT_STORAGE_PREFIX

    def __post_init__(self) -> None:
        prefix = (self.prefix or "").strip().strip("-")
        if not prefix:
            raise ValueError("Storage prefix cannot be empty")
        object.__setattr__(self, "prefix", prefix)

    @property
    def namespace(self) -> str:
        return self.prefix

    def slot_for(self, mode: Mode | str) -> str:
        """Return the un-namespaced slot name for ``mode``."""

        return _MODE_SLOTS[Mode.coerce(mode)]

    def key_for(self, mode: Mode | str) -> str:
        return f"{self.prefix}-{self.slot_for(mode)}"

    @property
    def fallback_slot(self) -> str:
        return _FALLBACK_SLOT

    @property
    def fallback_key(self) -> str:
        return f"{self.prefix}-{_FALLBACK_SLOT}"

    def keys(self) -> Tuple[str, ...]:
        """Every live key owned by this partition, fallback first."""

        return (self.fallback_key, *(self.key_for(mode) for mode in Mode))

    def legacy_key_map(self) -> Dict[str, str]:
        """Map each legacy key to the live key that replaces it.

        Keys that coincide with a live key are left out so migration can
        never delete current data.
        """

        live = set(self.keys())
        mapping: Dict[str, str] = {}
        doubled = f"{self.prefix}-{_DOUBLED_PREFIX}"
        mapping[f"{doubled}-{_FALLBACK_SLOT}"] = self.fallback_key
        for mode in Mode:
            mapping[f"{doubled}-{self.slot_for(mode)}"] = self.key_for(mode)
        for legacy in LEGACY_THEME_KEYS:
            mapping.setdefault(legacy, self.fallback_key)
        return {old: new for old, new in mapping.items() if old not in live}


__all__ = ["DEFAULT_STORAGE_PREFIX", "LEGACY_THEME_KEYS", "Mode", "ModePartition"]
