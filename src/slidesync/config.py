"""Configuration for the theme-sync runtime."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from .partition import DEFAULT_STORAGE_PREFIX

__all__ = ["STORE_BACKENDS", "ThemeSyncConfig", "load_config"]

LOGGER = logging.getLogger(__name__)

STORE_BACKENDS: tuple[str, ...] = ("json", "memory", "qt")

_ENV_OVERRIDES: Mapping[str, str] = {
    "SLIDESYNC_STORAGE_PREFIX": "storage_prefix",
    "SLIDESYNC_STORE_BACKEND": "store_backend",
    "SLIDESYNC_STORE_PATH": "store_path",
    "SLIDESYNC_DEFAULT_THEME": "default_theme_id",
    "SLIDESYNC_CATALOG_PATH": "catalog_path",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "SLIDESYNC_PERSIST": "persist",
    "SLIDESYNC_DEBUG": "debug",
    "SLIDESYNC_AUTO_SYNC": "auto_sync",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "SLIDESYNC_SYNC_DEBOUNCE_MS": "sync_debounce_ms",
    "SLIDESYNC_STORAGE_DEBOUNCE_MS": "storage_debounce_ms",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


@dataclass(slots=True)
class ThemeSyncConfig:
    """Runtime knobs shared by every coordinator a runtime creates."""

    storage_prefix: str = DEFAULT_STORAGE_PREFIX
    sync_debounce_ms: int = 100
    storage_debounce_ms: int = 300
    persist: bool = True
    debug: bool = False
    auto_sync: bool = True
    store_backend: str = "json"
    store_path: Path | None = None
    default_theme_id: str | None = None
    catalog_path: Path | None = None

    def __post_init__(self) -> None:
        self.storage_prefix = (self.storage_prefix or "").strip() or DEFAULT_STORAGE_PREFIX
        self.sync_debounce_ms = max(0, int(self.sync_debounce_ms))
        self.storage_debounce_ms = max(0, int(self.storage_debounce_ms))
        backend = (self.store_backend or "json").strip().lower()
        if backend not in STORE_BACKENDS:
            LOGGER.warning("Unknown store backend %r; using json", self.store_backend)
            backend = "json"
        self.store_backend = backend
        if self.store_path is not None:
            self.store_path = Path(self.store_path).expanduser()
        if self.catalog_path is not None:
            self.catalog_path = Path(self.catalog_path).expanduser()

    @property
    def sync_debounce(self) -> float:
        return self.sync_debounce_ms / 1000.0

    @property
    def storage_debounce(self) -> float:
        return self.storage_debounce_ms / 1000.0


def load_config(overrides: Mapping[str, Any] | None = None) -> ThemeSyncConfig:
    """Build a config from defaults, explicit ``overrides`` and the environment.

    Environment variables take precedence so a deployment can adjust a
    packaged application without code changes.
    """

    config = ThemeSyncConfig()
    if overrides:
        config = _apply_overrides(config, overrides, source="caller")
    return _apply_env_overrides(config)


def _apply_overrides(
    config: ThemeSyncConfig, overrides: Mapping[str, Any], *, source: str
) -> ThemeSyncConfig:
    known = {field.name for field in fields(ThemeSyncConfig)}
    filtered = {key: value for key, value in overrides.items() if key in known}
    for key in overrides:
        if key not in known:
            LOGGER.warning("Ignoring unknown %s config override %s", source, key)
    if not filtered:
        return config
    return replace(config, **filtered)


def _apply_env_overrides(config: ThemeSyncConfig) -> ThemeSyncConfig:
    overrides: Dict[str, Any] = {}
    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is not None and value.strip():
            overrides[field_name] = value.strip()
    for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is not None:
            overrides[field_name] = value.strip().lower() in _TRUE_VALUES
    for env_name, field_name in _INT_ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is None:
            continue
        try:
            overrides[field_name] = int(value, 10)
        except ValueError:
            LOGGER.warning(
                "Environment override %s=%s is not a valid integer",
                env_name,
                value,
            )
    if overrides:
        config = _apply_overrides(config, overrides, source="environment")
    return config
