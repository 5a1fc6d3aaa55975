"""Per-consumer theme synchronization.

Each UI component that needs theme awareness owns one
:class:`ThemeSyncCoordinator`. It reconciles the theme the component asks
for with the canonical state and the persistent store:

* ``set_theme`` validates immediately, then arms the *sync* debounce. Calls
  inside the window replace the candidate, so only the last one lands.
* When the sync debounce fires the canonical state is updated and the
  *storage* debounce is armed. The coordinator reports ``synced`` without
  waiting for the write.
* When the storage debounce fires the selection is written to the mode's
  slot and to the mode-agnostic fallback key.

Storage failures during ordinary syncs degrade silently to in-memory
operation; only ``force_sync`` turns them into an ``error`` status.
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

from .errors import InvalidThemeError
from .events import SyncStatusChanged, ThemeChanged
from .partition import Mode
from .scheduling import Debouncer, LoopScheduler, Scheduler
from .state import CanonicalThemeState, get_theme_state
from .storage import ThemeStore
from .theme import Theme, ThemeRegistry

__all__ = [
    "STORAGE_DEBOUNCE_SECONDS",
    "STORAGE_WRITE_FAILED",
    "SYNC_DEBOUNCE_SECONDS",
    "SyncState",
    "SyncStatus",
    "ThemeSyncCoordinator",
    "ThemeSyncOptions",
]

LOGGER = logging.getLogger(__name__)

SYNC_DEBOUNCE_SECONDS = 0.1
STORAGE_DEBOUNCE_SECONDS = 0.3
STORAGE_WRITE_FAILED = "Failed to save theme to storage"

_IDS = itertools.count(1)


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


@dataclass(slots=True)
class SyncState:
    """Sync status reported by a single coordinator."""

    status: SyncStatus = SyncStatus.IDLE
    last_sync_time: float = 0.0
    error: str | None = None
    storage_degraded: bool = False


@dataclass(slots=True)
class ThemeSyncOptions:
    """Configuration for a :class:`ThemeSyncCoordinator`."""

    mode: Mode | str = Mode.SINGLE
    initial_theme_id: str | None = None
    persist: bool = True
    debug: bool = False
    auto_sync: bool = True
    sync_debounce: float = SYNC_DEBOUNCE_SECONDS
    storage_debounce: float = STORAGE_DEBOUNCE_SECONDS


class ThemeSyncCoordinator:
    """Keeps one consumer's theme in step with canonical state and storage."""

    def __init__(
        self,
        options: ThemeSyncOptions | None = None,
        *,
        registry: ThemeRegistry | None = None,
        state: CanonicalThemeState | None = None,
        store: ThemeStore | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] = time.time,
        **overrides: Any,
    ) -> None:
        options = options or ThemeSyncOptions()
        if overrides:
            options = replace(options, **overrides)
        self._options = options
        self._mode = Mode.coerce(options.mode)
        self._state = state or get_theme_state()
        self._registry = registry or self._state.registry
        self._store = store if store is not None else ThemeStore()
        self._scheduler = scheduler or LoopScheduler()
        self._clock = clock
        self._id = f"{self._mode.value}-{next(_IDS)}"
        self._sync_state = SyncState(last_sync_time=clock())
        self._closed = False

        self._candidate: str | None = None
        self._rejected: str | None = None
        self._candidate_source = "unknown"
        self._force = False
        self._pending_write: str | None = None
        self._last_theme_id: str | None = None

        self._sync_debouncer = Debouncer(
            self._scheduler,
            options.sync_debounce,
            self._complete_sync,
            name=f"theme-sync[{self._id}]",
        )
        self._storage_debouncer = Debouncer(
            self._scheduler,
            options.storage_debounce,
            self._flush_storage,
            name=f"theme-storage[{self._id}]",
        )

        self._attach(options.initial_theme_id)
        if options.auto_sync:
            self._state.subscribe(self._on_theme_changed)

    # ------------------------------------------------------------------
    # Consumer-facing state
    # ------------------------------------------------------------------
    @property
    def coordinator_id(self) -> str:
        return self._id

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def options(self) -> ThemeSyncOptions:
        return self._options

    @property
    def theme_id(self) -> str:
        return self._state.get(self._mode)

    @property
    def current_theme(self) -> Theme:
        return self._registry.resolve(self.theme_id) or self._registry.default()

    @property
    def sync_state(self) -> SyncState:
        return replace(self._sync_state)

    @property
    def status(self) -> SyncStatus:
        return self._sync_state.status

    @property
    def is_syncing(self) -> bool:
        return self._sync_state.status is SyncStatus.SYNCING

    @property
    def error(self) -> str | None:
        return self._sync_state.error

    @property
    def last_sync_time(self) -> float:
        return self._sync_state.last_sync_time

    @property
    def is_available(self) -> bool:
        return not self._closed

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def set_theme(self, theme_id: str, source: str = "user") -> bool:
        """Request ``theme_id`` for this coordinator's mode.

        Returns False when the id was rejected; the error is surfaced in
        :attr:`error` and the previous theme stays active.
        """

        if self._closed:
            LOGGER.debug("Ignoring set_theme(%r) on closed coordinator %s", theme_id, self._id)
            return False
        self._trace("Theme change requested: %r (source=%s)", theme_id, source)
        theme = self._validate(theme_id)
        if theme is None:
            return False
        self._rejected = None

        settled = not self._sync_debouncer.pending
        if settled and theme.id == self._last_theme_id and self._state.peek(self._mode) == theme.id:
            self._trace("Theme %s already active, skipping update", theme.id)
            if self._sync_state.status is SyncStatus.ERROR:
                self._transition(SyncStatus.SYNCED, error=None)
            return True

        self._candidate = theme.id
        self._candidate_source = source
        self._force = False
        self._transition(SyncStatus.SYNCING, error=None)
        self._sync_debouncer.trigger()
        return True

    def force_sync(self) -> bool:
        """Re-assert the canonical theme and write it to storage unconditionally."""

        if self._closed:
            return False
        self._trace("Force sync requested")
        self._rejected = None
        self._candidate = self._state.get(self._mode)
        self._candidate_source = "force-sync"
        self._force = True
        self._transition(SyncStatus.SYNCING)
        self._sync_debouncer.trigger()
        return True

    def reset_theme(self) -> bool:
        self._trace("Theme reset requested")
        return self.set_theme(self._registry.default_id, "reset")

    def get_theme_for_mode(self, mode: Mode | str) -> str:
        """Return the theme remembered for ``mode``.

        For this coordinator's own mode a selection still waiting on the
        sync debounce wins. Otherwise the live canonical selection wins,
        then a valid stored record, then the registry default.
        """

        target = Mode.coerce(mode)
        if target is self._mode and self._candidate is not None:
            return self._candidate
        live = self._state.peek(target)
        if live is not None:
            return live
        if self._options.persist:
            stored = self._store.read_mode(target)
            if stored is not None and self._registry.is_valid(stored):
                return stored
        return self._registry.default_id

    def set_theme_for_mode(self, mode: Mode | str, theme_id: str) -> bool:
        """Record ``theme_id`` for ``mode`` and write that mode's slot right away.

        For this coordinator's own mode the canonical update still goes
        through the sync debounce; other modes are updated immediately.
        """

        target = Mode.coerce(mode)
        if self._closed:
            return False
        if target is self._mode:
            if not self.set_theme(theme_id, f"mode-{target.value}"):
                return False
            if self._options.persist:
                self._store.write_mode(target, self._registry.require(theme_id).id)
            return True
        theme = self._validate(theme_id)
        if theme is None:
            return False
        self._state.set(target, theme.id, source=f"mode-{target.value}", origin=self)
        if self._options.persist:
            self._store.write_mode(target, theme.id)
        self._trace("Set theme for mode %s: %s", target.value, theme.id)
        return True

    def set_mode(self, mode: Mode | str) -> None:
        """Move this coordinator to another mode and re-run initialization."""

        target = Mode.coerce(mode)
        if target is self._mode or self._closed:
            return
        self._storage_debouncer.flush()
        self._sync_debouncer.cancel()
        self._candidate = None
        self._force = False
        previous = self._mode
        self._mode = target
        self._rejected = None
        self._sync_state.error = None
        self._attach(None)
        self._transition(SyncStatus.IDLE, error=None)
        self._trace("Switched mode %s -> %s", previous.value, target.value)

    def flush(self) -> None:
        """Run any pending sync and storage write right away."""

        if self._closed:
            return
        self._sync_debouncer.flush()
        self._storage_debouncer.flush()

    def close(self, *, flush: bool = False) -> None:
        """Cancel pending timers and stop observing the canonical state."""

        if self._closed:
            return
        if flush:
            self.flush()
        self._sync_debouncer.cancel()
        self._storage_debouncer.cancel()
        self._candidate = None
        self._pending_write = None
        if self._options.auto_sync:
            self._state.unsubscribe(self._on_theme_changed)
        self._closed = True
        self._trace("Coordinator closed")

    def __enter__(self) -> "ThemeSyncCoordinator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"ThemeSyncCoordinator(id={self._id!r}, mode={self._mode.value!r}, "
            f"status={self._sync_state.status.value!r})"
        )

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------
    def _attach(self, initial_theme_id: str | None) -> None:
        resolved, origin = self._resolve_initial(initial_theme_id)
        self._trace("Initializing theme sync with %s (from %s)", resolved, origin)
        if self._state.peek(self._mode) != resolved:
            self._state.set(self._mode, resolved, source="initialization", origin=self)
        self._last_theme_id = resolved
        if self._options.persist and self._store.read_mode(self._mode) != resolved:
            self._schedule_write(resolved)

    def _resolve_initial(self, initial_theme_id: str | None) -> tuple[str, str]:
        if initial_theme_id is not None:
            theme = self._validate(initial_theme_id)
            if theme is not None:
                return theme.id, "initial"
        if self._options.persist:
            readers = (
                ("mode storage", lambda: self._store.read_mode(self._mode)),
                ("fallback storage", self._store.read_fallback),
            )
            for label, read in readers:
                stored = read()
                if stored is None:
                    continue
                theme = self._registry.resolve(stored)
                if theme is not None:
                    return theme.id, label
                self._trace("Ignoring unknown theme %r in %s", stored, label)
        return self._registry.default_id, "default"

    # ------------------------------------------------------------------
    # Timer callbacks
    # ------------------------------------------------------------------
    def _complete_sync(self) -> None:
        if self._closed or self._candidate is None:
            return
        theme_id = self._candidate
        source = self._candidate_source
        forced = self._force
        self._candidate = None
        self._force = False

        try:
            changed = self._state.set(self._mode, theme_id, source=source, origin=self)
        except InvalidThemeError as exc:
            self._transition(SyncStatus.ERROR, error=str(exc))
            return
        if changed:
            self._trace("Updated canonical theme to %s (source=%s)", theme_id, source)
        self._last_theme_id = theme_id
        self._sync_state.last_sync_time = self._clock()

        if forced:
            self._storage_debouncer.cancel()
            self._pending_write = None
            if self._options.persist and not self._write(theme_id):
                self._transition(SyncStatus.ERROR, error=STORAGE_WRITE_FAILED)
                return
        else:
            self._schedule_write(theme_id)
        if self._rejected is not None:
            self._transition(SyncStatus.ERROR, error=self._rejected)
        else:
            self._transition(SyncStatus.SYNCED, error=None)
        self._trace("Theme sync completed: %s", theme_id)

    def _flush_storage(self) -> None:
        if self._closed:
            return
        theme_id = self._pending_write
        self._pending_write = None
        if theme_id is None:
            return
        if (
            self._store.read_mode(self._mode) == theme_id
            and self._store.read_fallback() == theme_id
        ):
            self._trace("Storage already holds %s, skipping write", theme_id)
            return
        self._write(theme_id)

    def _schedule_write(self, theme_id: str) -> None:
        if not self._options.persist:
            return
        self._pending_write = theme_id
        self._storage_debouncer.trigger()

    def _write(self, theme_id: str) -> bool:
        ok = self._store.write_selection(self._mode, theme_id)
        if self._closed:
            return ok
        self._sync_state.storage_degraded = not ok
        if ok:
            self._trace("Saved theme %s to storage", theme_id)
        return ok

    # ------------------------------------------------------------------
    # Canonical state observation
    # ------------------------------------------------------------------
    def _on_theme_changed(self, event: ThemeChanged) -> None:
        if self._closed or event.origin is self:
            return
        if event.mode != self._mode.value:
            return
        self._last_theme_id = event.theme_id
        self._sync_state.last_sync_time = self._clock()
        self._trace("Observed canonical change to %s (source=%s)", event.theme_id, event.source)
        if self._sync_debouncer.pending:
            return
        self._rejected = None
        self._transition(SyncStatus.SYNCED, error=None)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _validate(self, theme_id: object) -> Theme | None:
        theme = None
        if isinstance(theme_id, str) and theme_id.strip():
            theme = self._registry.resolve(theme_id)
        if theme is None:
            message = str(InvalidThemeError(theme_id))
            LOGGER.warning("ThemeSync[%s] %s", self._mode.value, message)
            self._rejected = message
            # A queued sync keeps running; it reports the rejection when it lands.
            status = SyncStatus.SYNCING if self._sync_debouncer.pending else SyncStatus.ERROR
            self._transition(status, error=message)
        return theme

    _KEEP: Any = object()

    def _transition(self, status: SyncStatus, *, error: Any = _KEEP) -> None:
        previous = (self._sync_state.status, self._sync_state.error)
        self._sync_state.status = status
        if error is not ThemeSyncCoordinator._KEEP:
            self._sync_state.error = error
        if (self._sync_state.status, self._sync_state.error) == previous:
            return
        self._state.event_bus.publish(
            SyncStatusChanged(
                coordinator_id=self._id,
                mode=self._mode.value,
                status=status.value,
                error=self._sync_state.error,
            )
        )

    def _trace(self, message: str, *args: Any) -> None:
        level = logging.INFO if self._options.debug else logging.DEBUG
        if LOGGER.isEnabledFor(level):
            LOGGER.log(level, "ThemeSync[%s] " + message, self._mode.value, *args)
