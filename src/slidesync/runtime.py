"""Process-level wiring for theme synchronization.

A host application builds one :class:`ThemeSyncRuntime` at startup. It owns
the registry, the durable store and the canonical state, runs the legacy
storage migration once, and hands out coordinators that share them.
"""

from __future__ import annotations

import logging
import time
import weakref
from dataclasses import replace
from typing import Any, Callable, List

from .config import ThemeSyncConfig, load_config
from .coordinator import ThemeSyncCoordinator, ThemeSyncOptions
from .errors import InvalidThemeError
from .events import EventBus, ThemeStorageMigrated
from .partition import ModePartition
from .scheduling import LoopScheduler, Scheduler
from .state import CanonicalThemeState, get_theme_state, set_theme_state
from .storage import JsonFileBackend, KeyValueBackend, MemoryBackend, MigrationReport, ThemeStore
from .theme import ThemeRegistry, default_registry

__all__ = ["ThemeSyncRuntime", "build_registry", "create_backend"]

LOGGER = logging.getLogger(__name__)


def create_backend(config: ThemeSyncConfig) -> KeyValueBackend:
    """Return the key/value backend named by ``config.store_backend``."""

    if config.store_backend == "memory":
        return MemoryBackend()
    if config.store_backend == "qt":
        from .qt import QSettingsBackend

        return QSettingsBackend(path=config.store_path)
    return JsonFileBackend(config.store_path)


def build_registry(config: ThemeSyncConfig) -> ThemeRegistry:
    """Load the theme catalogue and apply the configured default."""

    registry = default_registry()
    if config.catalog_path is not None:
        try:
            registry = ThemeRegistry.from_file(config.catalog_path)
        except (OSError, ValueError, KeyError, TypeError, InvalidThemeError) as exc:
            LOGGER.warning(
                "Unable to load theme catalogue %s; using built-in themes: %s",
                config.catalog_path,
                exc,
            )
    if config.default_theme_id and config.default_theme_id != registry.default_id:
        try:
            registry = ThemeRegistry(registry.available(), default_id=config.default_theme_id)
        except InvalidThemeError:
            LOGGER.warning(
                "Configured default theme %r is not registered; keeping %s",
                config.default_theme_id,
                registry.default_id,
            )
    return registry


class ThemeSyncRuntime:
    """Startup and shutdown of the theme-sync subsystem."""

    def __init__(
        self,
        config: ThemeSyncConfig | None = None,
        *,
        registry: ThemeRegistry | None = None,
        backend: KeyValueBackend | None = None,
        scheduler: Scheduler | None = None,
        loop: Any = None,
        event_bus: EventBus | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or load_config()
        self._registry = registry or build_registry(self._config)
        self._backend = backend
        self._scheduler = scheduler or LoopScheduler(loop)
        self._event_bus = event_bus
        self._owns_bus = event_bus is None
        self._clock = clock
        self._store: ThemeStore | None = None
        self._state: CanonicalThemeState | None = None
        self._migration: MigrationReport | None = None
        self._coordinators: "weakref.WeakSet[ThemeSyncCoordinator]" = weakref.WeakSet()

    @property
    def config(self) -> ThemeSyncConfig:
        return self._config

    @property
    def registry(self) -> ThemeRegistry:
        return self._registry

    @property
    def started(self) -> bool:
        return self._state is not None

    @property
    def store(self) -> ThemeStore:
        if self._store is None:
            raise RuntimeError("ThemeSyncRuntime has not been started")
        return self._store

    @property
    def state(self) -> CanonicalThemeState:
        if self._state is None:
            raise RuntimeError("ThemeSyncRuntime has not been started")
        return self._state

    @property
    def migration_report(self) -> MigrationReport | None:
        return self._migration

    def start(self) -> CanonicalThemeState:
        """Open storage, fold legacy keys in, and install the canonical state."""

        if self._state is not None:
            return self._state
        backend = self._backend if self._backend is not None else create_backend(self._config)
        self._backend = backend
        self._store = ThemeStore(backend, partition=ModePartition(self._config.storage_prefix))
        state = CanonicalThemeState(self._registry, event_bus=self._event_bus)

        report = self._store.migrate_legacy_keys()
        self._migration = report
        if report.changed or report.conflicts:
            LOGGER.info(
                "Theme storage migration: %d migrated, %d removed, %d conflicts",
                len(report.migrated),
                len(report.removed),
                len(report.conflicts),
            )
            state.event_bus.publish(
                ThemeStorageMigrated(
                    migrated=dict(report.migrated),
                    removed=list(report.removed),
                    conflicts=len(report.conflicts),
                )
            )
        if report.retained:
            LOGGER.warning("Legacy theme keys kept for a later retry: %s", report.retained)

        self._state = set_theme_state(state)
        LOGGER.debug(
            "Theme sync runtime started (backend=%s, prefix=%s)",
            getattr(backend, "name", type(backend).__name__),
            self._config.storage_prefix,
        )
        return state

    def coordinator(self, options: ThemeSyncOptions | None = None, **overrides: Any) -> ThemeSyncCoordinator:
        """Create a coordinator sharing this runtime's state, store and timers."""

        self.start()
        base = options or ThemeSyncOptions(
            persist=self._config.persist,
            debug=self._config.debug,
            auto_sync=self._config.auto_sync,
            sync_debounce=self._config.sync_debounce,
            storage_debounce=self._config.storage_debounce,
        )
        if overrides:
            base = replace(base, **overrides)
        coordinator = ThemeSyncCoordinator(
            base,
            registry=self._registry,
            state=self.state,
            store=self.store,
            scheduler=self._scheduler,
            clock=self._clock,
        )
        self._coordinators.add(coordinator)
        return coordinator

    def coordinators(self) -> List[ThemeSyncCoordinator]:
        return [coordinator for coordinator in self._coordinators if coordinator.is_available]

    def shutdown(self, *, flush: bool = True) -> None:
        """Close every coordinator, optionally writing pending selections first.

        A bus the runtime created is cleared; a caller-supplied bus only
        loses the subscriptions of the coordinators closed here.
        """

        if self._state is None:
            return
        for coordinator in list(self._coordinators):
            coordinator.close(flush=flush)
        self._coordinators = weakref.WeakSet()
        if self._owns_bus:
            self._state.event_bus.clear()
        if get_theme_state() is self._state:
            set_theme_state(None)
        self._state = None
        LOGGER.debug("Theme sync runtime shut down")

    def __enter__(self) -> "ThemeSyncRuntime":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
