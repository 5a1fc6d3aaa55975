"""Theme state synchronization and persistence for slide-deck editors.

Hosts configure log output with :func:`slidesync.utils.setup_logging`.
"""

from .config import ThemeSyncConfig, load_config
from .coordinator import SyncState, SyncStatus, ThemeSyncCoordinator, ThemeSyncOptions
from .errors import InvalidThemeError, MigrationConflict, StorageUnavailableError, ThemeSyncError
from .events import EventBus, SyncStatusChanged, ThemeChanged, ThemeStorageMigrated
from .partition import Mode, ModePartition
from .runtime import ThemeSyncRuntime, create_backend
from .scheduling import Debouncer, LoopScheduler, Scheduler
from .state import CanonicalThemeState, get_theme_state, set_theme_state
from .storage import JsonFileBackend, KeyValueBackend, MemoryBackend, MigrationReport, ThemeStore
from .theme import Theme, ThemeCategory, ThemeRegistry, default_registry

__version__ = "0.1.0"

__all__ = [
    "CanonicalThemeState",
    "Debouncer",
    "EventBus",
    "InvalidThemeError",
    "JsonFileBackend",
    "KeyValueBackend",
    "LoopScheduler",
    "MemoryBackend",
    "MigrationConflict",
    "MigrationReport",
    "Mode",
    "ModePartition",
    "Scheduler",
    "StorageUnavailableError",
    "SyncState",
    "SyncStatus",
    "SyncStatusChanged",
    "Theme",
    "ThemeCategory",
    "ThemeChanged",
    "ThemeRegistry",
    "ThemeStorageMigrated",
    "ThemeStore",
    "ThemeSyncConfig",
    "ThemeSyncCoordinator",
    "ThemeSyncError",
    "ThemeSyncOptions",
    "ThemeSyncRuntime",
    "create_backend",
    "default_registry",
    "get_theme_state",
    "load_config",
    "set_theme_state",
    "__version__",
]
