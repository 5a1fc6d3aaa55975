"""Persistent store adapter for theme selections.

All backend failures stop here: reads degrade to "absent" and writes to
``False`` plus a warning, so callers keep operating in memory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List

from ..errors import MigrationConflict, StorageUnavailableError
from ..partition import Mode, ModePartition
from .backends import KeyValueBackend, MemoryBackend

__all__ = ["MigrationReport", "ThemeStore"]

LOGGER = logging.getLogger(__name__)
_STORAGE_ERRORS = (StorageUnavailableError, OSError)


@dataclass(slots=True)
class MigrationReport:
    """Outcome of a legacy-key migration pass."""

    migrated: dict[str, str] = field(default_factory=dict)
    removed: List[str] = field(default_factory=list)
    retained: List[str] = field(default_factory=list)
    conflicts: List[MigrationConflict] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.migrated or self.removed)


class ThemeStore:
    """Namespaced, best-effort access to a :class:`KeyValueBackend`."""

    def __init__(
        self,
        backend: KeyValueBackend | None = None,
        *,
        partition: ModePartition | None = None,
    ) -> None:
        self._backend = backend if backend is not None else MemoryBackend()
        self._partition = partition or ModePartition()

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def partition(self) -> ModePartition:
        return self._partition

    # ------------------------------------------------------------------
    # Namespaced primitives
    # ------------------------------------------------------------------
    @staticmethod
    def compose(namespace: str | None, key: str) -> str:
        return f"{namespace}-{key}" if namespace else key

    def get(self, namespace: str | None, key: str) -> str | None:
        full_key = self.compose(namespace, key)
        try:
            return self._backend.get_item(full_key)
        except _STORAGE_ERRORS as exc:
            LOGGER.warning("Theme storage read failed for %s: %s", full_key, exc)
            return None

    def set(self, namespace: str | None, key: str, value: str) -> bool:
        full_key = self.compose(namespace, key)
        try:
            self._backend.set_item(full_key, value)
        except _STORAGE_ERRORS as exc:
            LOGGER.warning(
                "Theme storage write failed for %s; continuing without durability: %s",
                full_key,
                exc,
            )
            return False
        return True

    def remove(self, namespace: str | None, key: str) -> bool:
        full_key = self.compose(namespace, key)
        try:
            self._backend.remove_item(full_key)
        except _STORAGE_ERRORS as exc:
            LOGGER.warning("Theme storage delete failed for %s: %s", full_key, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Mode-aware helpers
    # ------------------------------------------------------------------
    def read_mode(self, mode: Mode | str) -> str | None:
        return self.get(self._partition.namespace, self._partition.slot_for(mode))

    def read_fallback(self) -> str | None:
        return self.get(self._partition.namespace, self._partition.fallback_slot)

    def write_mode(self, mode: Mode | str, theme_id: str) -> bool:
        return self.set(self._partition.namespace, self._partition.slot_for(mode), theme_id)

    def write_selection(self, mode: Mode | str, theme_id: str) -> bool:
        """Persist ``theme_id`` as the fallback and as ``mode``'s selection."""

        namespace = self._partition.namespace
        fallback_ok = self.set(namespace, self._partition.fallback_slot, theme_id)
        mode_ok = self.set(namespace, self._partition.slot_for(mode), theme_id)
        return fallback_ok and mode_ok

    # ------------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------------
    def migrate(
        self,
        old_keys: Iterable[str],
        new_key_builder: Callable[[str], str],
    ) -> MigrationReport:
        """Fold legacy keys into their namespaced replacements.

        A new key that already exists always wins over legacy data. Legacy
        keys are deleted once handled, except when copying them failed.
        """

        report = MigrationReport()
        for old_key in old_keys:
            value = self.get(None, old_key)
            if value is None:
                continue
            new_key = new_key_builder(old_key)
            if new_key == old_key:
                continue
            current = self.get(None, new_key)
            if current is None:
                if not self.set(None, new_key, value):
                    report.retained.append(old_key)
                    continue
                report.migrated[old_key] = new_key
                LOGGER.info("Migrated theme storage %s -> %s (%s)", old_key, new_key, value)
            elif current != value:
                report.conflicts.append(
                    MigrationConflict(
                        legacy_key=old_key,
                        new_key=new_key,
                        legacy_value=value,
                        kept_value=current,
                    )
                )
                LOGGER.info(
                    "Legacy theme key %s conflicts with %s; keeping %s",
                    old_key,
                    new_key,
                    current,
                )
            if self.remove(None, old_key):
                report.removed.append(old_key)
            else:
                report.retained.append(old_key)
        return report

    def migrate_legacy_keys(self) -> MigrationReport:
        mapping = self._partition.legacy_key_map()
        return self.migrate(list(mapping), mapping.__getitem__)
