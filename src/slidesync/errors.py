"""Error taxonomy for theme synchronization.

None of these escape into the host UI: coordinators translate them into
``SyncState.error`` messages and the store adapter turns storage failures
into logged warnings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


class ThemeSyncError(Exception):
    """Base class for theme synchronization failures."""

    code: ClassVar[str] = "theme_sync_error"


class InvalidThemeError(ThemeSyncError):
    """Raised when a theme id does not resolve in the registry."""

    code = "invalid_theme"

    def __init__(self, theme_id: object) -> None:
        self.theme_id = theme_id
        super().__init__(f"Invalid theme ID: {theme_id}")


class StorageUnavailableError(ThemeSyncError):
    """Raised by backends when the durable store cannot be read or written."""

    code = "storage_unavailable"

    def __init__(self, message: str, *, key: str | None = None, operation: str | None = None) -> None:
        self.key = key
        self.operation = operation
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class MigrationConflict:
    """A legacy key and its namespaced replacement held different values.

    The namespaced value always wins; the legacy value is recorded here only
    for diagnostics.
    """

    legacy_key: str
    new_key: str
    legacy_value: str
    kept_value: str


__all__ = [
    "InvalidThemeError",
    "MigrationConflict",
    "StorageUnavailableError",
    "ThemeSyncError",
]
