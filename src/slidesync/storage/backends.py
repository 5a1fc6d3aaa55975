"""Key/value backends that give theme selections durability."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping

from ..errors import StorageUnavailableError

__all__ = ["JsonFileBackend", "KeyValueBackend", "MemoryBackend", "default_store_path"]

LOGGER = logging.getLogger(__name__)
_STORE_DIR = Path.home() / ".slidesync"
_STORE_FILENAME = "theme-store.json"
_STORE_VERSION = 1


def default_store_path() -> Path:
    return _STORE_DIR / _STORE_FILENAME


class KeyValueBackend(ABC):
    """Interface for string key/value stores.

    Implementations raise :class:`StorageUnavailableError` (or ``OSError``)
    when the underlying medium refuses an operation.
    """

    name: str = "unknown"

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the value stored under ``key`` or None."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> List[str]:
        """Return every key currently stored."""

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get_item(key) is not None


class MemoryBackend(KeyValueBackend):
    """Process-local backend, modelled on browser ``localStorage``.

    ``quota`` bounds the total number of stored characters and ``enabled``
    switches the whole store off, mirroring quota-exceeded and
    privacy-mode failures.
    """

    name = "memory"

    def __init__(
        self,
        initial: Mapping[str, str] | None = None,
        *,
        quota: int | None = None,
        enabled: bool = True,
    ) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self.quota = quota
        self.enabled = enabled

    def get_item(self, key: str) -> str | None:
        self._ensure_enabled("get", key)
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._ensure_enabled("set", key)
        if self.quota is not None:
            used = sum(len(k) + len(v) for k, v in self._data.items() if k != key)
            if used + len(key) + len(value) > self.quota:
                raise StorageUnavailableError("Storage quota exceeded", key=key, operation="set")
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._ensure_enabled("remove", key)
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        self._ensure_enabled("keys", None)
        return list(self._data)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)

    def _ensure_enabled(self, operation: str, key: str | None) -> None:
        if not self.enabled:
            raise StorageUnavailableError("Storage is disabled", key=key, operation=operation)


class JsonFileBackend(KeyValueBackend):
    """Backend persisting a flat JSON object with atomic file writes."""

    name = "json"

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else default_store_path()
        self._cache: Dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        self._write(data, key=key, operation="set")

    def remove_item(self, key: str) -> None:
        data = dict(self._load())
        if key not in data:
            return
        del data[key]
        self._write(data, key=key, operation="remove")

    def keys(self) -> List[str]:
        return list(self._load())

    def reload(self) -> None:
        self._cache = None

    def _load(self) -> Dict[str, str]:
        if self._cache is None:
            self._cache = self._read_payload()
        return self._cache

    def _read_payload(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload: Any = json.loads(text)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Theme store %s is not valid JSON: %s", self._path, exc)
            return {}
        except OSError as exc:
            raise StorageUnavailableError(
                f"Unable to read theme store {self._path}: {exc}", operation="get"
            ) from exc
        if not isinstance(payload, Mapping):
            LOGGER.warning("Theme store %s does not contain a JSON object", self._path)
            return {}
        entries = payload.get("entries")
        if not isinstance(entries, Mapping):
            return {}
        return {str(k): v for k, v in entries.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str], *, key: str, operation: str) -> None:
        body = json.dumps({"version": _STORE_VERSION, "entries": data}, indent=2, sort_keys=True)
        tmp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(body, encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Unable to write theme store {self._path}: {exc}", key=key, operation=operation
            ) from exc
        self._cache = data
        LOGGER.debug("Theme store %s updated (%s %s)", self._path, operation, key)
