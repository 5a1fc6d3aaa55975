"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from slidesync.config import ThemeSyncConfig, load_config


def test_defaults() -> None:
    config = load_config()

    assert config == ThemeSyncConfig()
    assert config.storage_prefix == "ai-ppt"
    assert config.sync_debounce == pytest.approx(0.1)
    assert config.storage_debounce == pytest.approx(0.3)
    assert config.persist is True
    assert config.store_backend == "json"


def test_explicit_overrides(tmp_path: Path) -> None:
    config = load_config({"persist": False, "store_path": str(tmp_path / "s.json")})

    assert config.persist is False
    assert config.store_path == tmp_path / "s.json"


def test_unknown_override_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        config = load_config({"colour": "blue"})

    assert config == ThemeSyncConfig()
    assert "colour" in caplog.text


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SLIDESYNC_STORAGE_PREFIX", "deck")
    monkeypatch.setenv("SLIDESYNC_SYNC_DEBOUNCE_MS", "25")
    monkeypatch.setenv("SLIDESYNC_PERSIST", "off")
    monkeypatch.setenv("SLIDESYNC_DEBUG", "yes")
    monkeypatch.setenv("SLIDESYNC_STORE_BACKEND", "memory")
    monkeypatch.setenv("SLIDESYNC_STORE_PATH", str(tmp_path / "env.json"))

    config = load_config({"storage_prefix": "ignored", "debug": False})

    assert config.storage_prefix == "deck"
    assert config.sync_debounce_ms == 25
    assert config.persist is False
    assert config.debug is True
    assert config.store_backend == "memory"
    assert config.store_path == tmp_path / "env.json"


def test_invalid_integer_env_is_ignored(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("SLIDESYNC_STORAGE_DEBOUNCE_MS", "soon")

    with caplog.at_level("WARNING"):
        config = load_config()

    assert config.storage_debounce_ms == 300
    assert "not a valid integer" in caplog.text


def test_values_are_normalized(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        config = ThemeSyncConfig(
            storage_prefix="  ",
            sync_debounce_ms=-5,
            store_backend="Redis",
        )

    assert config.storage_prefix == "ai-ppt"
    assert config.sync_debounce_ms == 0
    assert config.store_backend == "json"
    assert "Unknown store backend" in caplog.text
