"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from slidesync.state import CanonicalThemeState, set_theme_state
from slidesync.storage import ThemeStore
from slidesync.theme import default_registry

from tests.helpers import FakeScheduler, RecordingBackend


@pytest.fixture(autouse=True)
def _isolated_theme_state():
    set_theme_state(None)
    yield
    set_theme_state(None)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "SLIDESYNC_STORAGE_PREFIX",
        "SLIDESYNC_STORE_BACKEND",
        "SLIDESYNC_STORE_PATH",
        "SLIDESYNC_DEFAULT_THEME",
        "SLIDESYNC_CATALOG_PATH",
        "SLIDESYNC_PERSIST",
        "SLIDESYNC_DEBUG",
        "SLIDESYNC_AUTO_SYNC",
        "SLIDESYNC_SYNC_DEBOUNCE_MS",
        "SLIDESYNC_STORAGE_DEBOUNCE_MS",
        "SLIDESYNC_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def store(backend: RecordingBackend) -> ThemeStore:
    return ThemeStore(backend)


@pytest.fixture
def state(registry) -> CanonicalThemeState:
    return CanonicalThemeState(registry)
