"""Tests for the logging helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from slidesync.utils import logging as logging_utils


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch: pytest.MonkeyPatch):
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    watched = ("slidesync", "asyncio", "qasync")
    levels = {name: logging.getLogger(name).level for name in watched}
    monkeypatch.setattr(logging_utils, "_CONFIGURED", False)
    monkeypatch.setattr(logging_utils, "_LOG_PATH", None)
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    for name, saved in levels.items():
        logging.getLogger(name).setLevel(saved)
    logging.captureWarnings(False)


def test_setup_logging_creates_rotating_file(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"

    log_path = logging_utils.setup_logging(
        level=logging.INFO,
        log_dir=log_dir,
        console=False,
        force=True,
    )

    logger = logging_utils.get_logger("slidesync.tests")
    logger.info("Logging smoke test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == log_dir / "slidesync.log"
    assert logging_utils.get_log_path() == log_path
    assert "Logging smoke test" in log_path.read_text(encoding="utf-8")


def test_setup_logging_is_configured_once(tmp_path: Path) -> None:
    first = logging_utils.setup_logging(log_dir=tmp_path / "a", console=False)
    second = logging_utils.setup_logging(log_dir=tmp_path / "b", console=False)

    assert first == second
    assert not (tmp_path / "b").exists()


def test_log_dir_and_level_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SLIDESYNC_LOG_DIR", str(tmp_path / "env-logs"))
    monkeypatch.setenv("SLIDESYNC_DEBUG", "1")

    log_path = logging_utils.setup_logging(console=False, force=True)

    assert log_path.parent == tmp_path / "env-logs"
    assert logging.getLogger("slidesync").level == logging.DEBUG
    assert logging.getLogger("asyncio").level == logging.WARNING


def test_get_logger_namespaces_names() -> None:
    assert logging_utils.get_logger("host.ui").name == "slidesync.host.ui"
    assert logging_utils.get_logger("slidesync.coordinator").name == "slidesync.coordinator"
    assert logging_utils.get_logger("slidesync").name == "slidesync"
