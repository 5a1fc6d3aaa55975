"""Tests for runtime wiring."""

from __future__ import annotations

from pathlib import Path

import pytest

from slidesync.config import ThemeSyncConfig
from slidesync.events import EventBus, ThemeChanged, ThemeStorageMigrated
from slidesync.runtime import ThemeSyncRuntime, build_registry, create_backend
from slidesync.state import get_theme_state
from slidesync.storage import JsonFileBackend, MemoryBackend
from slidesync.theme import ThemeRegistry, default_registry

from tests.helpers import FakeScheduler, RecordingBackend


def _runtime(backend=None, **config) -> ThemeSyncRuntime:
    return ThemeSyncRuntime(
        ThemeSyncConfig(store_backend="memory", **config),
        backend=backend if backend is not None else RecordingBackend(),
        scheduler=FakeScheduler(),
    )


def test_start_migrates_and_installs_state() -> None:
    backend = RecordingBackend({"ai-ppt-theme": "modern-minimal"})
    bus = EventBus()
    migrations: list[ThemeStorageMigrated] = []
    bus.subscribe(ThemeStorageMigrated, migrations.append)
    runtime = ThemeSyncRuntime(
        ThemeSyncConfig(store_backend="memory"),
        backend=backend,
        scheduler=FakeScheduler(),
        event_bus=bus,
    )

    state = runtime.start()

    assert get_theme_state() is state
    assert runtime.migration_report is not None
    assert runtime.migration_report.migrated == {"ai-ppt-theme": "ai-ppt-selected-theme"}
    assert [event.migrated for event in migrations] == [{"ai-ppt-theme": "ai-ppt-selected-theme"}]
    assert runtime.coordinator().theme_id == "modern-minimal"


def test_start_is_idempotent() -> None:
    backend = RecordingBackend({"app-theme": "ocean-depth"})
    runtime = _runtime(backend)

    first = runtime.start()
    report = runtime.migration_report
    backend.reset_writes()

    assert runtime.start() is first
    assert runtime.migration_report is report
    assert backend.writes == []


def test_store_requires_start() -> None:
    runtime = _runtime()
    assert not runtime.started
    with pytest.raises(RuntimeError):
        runtime.store


def test_coordinator_options_follow_config() -> None:
    runtime = _runtime(sync_debounce_ms=50, storage_debounce_ms=500, debug=True, persist=False)

    coordinator = runtime.coordinator(mode="presentation")

    assert coordinator.options.sync_debounce == pytest.approx(0.05)
    assert coordinator.options.storage_debounce == pytest.approx(0.5)
    assert coordinator.options.debug is True
    assert coordinator.options.persist is False
    assert coordinator.mode.value == "presentation"
    assert runtime.coordinators() == [coordinator]


def test_custom_prefix_namespaces_keys() -> None:
    backend = RecordingBackend()
    runtime = _runtime(backend, storage_prefix="deck")

    coordinator = runtime.coordinator()
    coordinator.set_theme("ocean-depth")
    coordinator.flush()

    assert backend.snapshot() == {
        "deck-selected-theme": "ocean-depth",
        "deck-single-mode-theme": "ocean-depth",
    }


def test_shutdown_flushes_and_closes() -> None:
    backend = RecordingBackend()
    runtime = _runtime(backend)
    coordinator = runtime.coordinator()
    state = runtime.state
    coordinator.set_theme("executive-dark")

    runtime.shutdown()

    assert backend.get_item("ai-ppt-single-mode-theme") == "executive-dark"
    assert coordinator.closed
    assert not runtime.started
    assert get_theme_state() is not state
    assert runtime.coordinators() == []


def test_shutdown_without_flush_drops_pending_changes() -> None:
    backend = RecordingBackend()
    runtime = _runtime(backend)
    coordinator = runtime.coordinator()
    coordinator.set_theme("executive-dark")

    runtime.shutdown(flush=False)

    assert backend.get_item("ai-ppt-single-mode-theme") is None


def test_shutdown_keeps_foreign_subscribers_on_a_shared_bus() -> None:
    bus = EventBus()
    seen: list[ThemeChanged] = []
    bus.subscribe(ThemeChanged, seen.append)
    runtime = ThemeSyncRuntime(
        ThemeSyncConfig(store_backend="memory"),
        backend=RecordingBackend(),
        scheduler=FakeScheduler(),
        event_bus=bus,
    )
    coordinator = runtime.coordinator()
    assert bus.handler_count(ThemeChanged) == 2

    runtime.shutdown()
    seen.clear()

    assert coordinator.closed
    assert bus.handler_count(ThemeChanged) == 1
    bus.publish(ThemeChanged(mode="single", theme_id="ocean-depth", previous_id=None, source="host"))
    assert [event.theme_id for event in seen] == ["ocean-depth"]


def test_shutdown_clears_a_bus_it_created() -> None:
    runtime = _runtime()
    state = runtime.start()
    state.event_bus.subscribe(ThemeChanged, lambda event: None)

    runtime.shutdown()

    assert state.event_bus.handler_count() == 0


def test_context_manager() -> None:
    with _runtime() as runtime:
        assert runtime.started
    assert not runtime.started


def test_create_backend(tmp_path: Path) -> None:
    memory = create_backend(ThemeSyncConfig(store_backend="memory"))
    json_backend = create_backend(ThemeSyncConfig(store_path=tmp_path / "store.json"))

    assert isinstance(memory, MemoryBackend)
    assert isinstance(json_backend, JsonFileBackend)
    assert json_backend.path == tmp_path / "store.json"


def test_build_registry_applies_configured_default() -> None:
    registry = build_registry(ThemeSyncConfig(default_theme_id="executive-dark"))

    assert registry.default_id == "executive-dark"
    assert registry.available_ids() == default_registry().available_ids()


def test_build_registry_ignores_unknown_default(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        registry = build_registry(ThemeSyncConfig(default_theme_id="retired-theme"))

    assert registry.default_id == "corporate-blue"
    assert "not registered" in caplog.text


def test_build_registry_loads_catalogue(tmp_path: Path) -> None:
    path = default_registry().export_catalog(tmp_path / "catalog.json")
    registry = build_registry(ThemeSyncConfig(catalog_path=path))
    assert isinstance(registry, ThemeRegistry)
    assert registry.available_ids() == default_registry().available_ids()


def test_build_registry_falls_back_on_broken_catalogue(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "catalog.json"
    path.write_text("[", encoding="utf-8")

    with caplog.at_level("WARNING"):
        registry = build_registry(ThemeSyncConfig(catalog_path=path))

    assert registry is default_registry()
    assert "using built-in themes" in caplog.text
