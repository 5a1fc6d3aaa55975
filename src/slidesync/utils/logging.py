"""Logging setup for applications hosting theme sync.

The library itself only creates module loggers under ``slidesync``. A host
calls :func:`setup_logging` once at startup, before building its
:class:`~slidesync.runtime.ThemeSyncRuntime`:

    from slidesync.utils import setup_logging

    setup_logging()
    with ThemeSyncRuntime() as runtime:
        ...
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["setup_logging", "get_logger", "get_log_path"]

_DEFAULT_LOG_DIR = Path.home() / ".slidesync" / "logs"
_LOG_FILENAME = "slidesync.log"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_PACKAGE_LOGGER = "slidesync"
_DEBUG_ENV = "SLIDESYNC_DEBUG"
_LOG_DIR_ENV = "SLIDESYNC_LOG_DIR"
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_NOISY_LOGGERS: tuple[str, ...] = ("asyncio", "qasync")
_CONFIGURED = False
_LOG_PATH: Path | None = None


def setup_logging(
    level: int | None = None,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """Configure root logging with a rotating file and an optional console handler.

    ``level`` defaults to DEBUG when ``SLIDESYNC_DEBUG`` is truthy and INFO
    otherwise. Repeated calls are no-ops unless ``force`` is set.
    """

    global _CONFIGURED, _LOG_PATH
    if _CONFIGURED and not force and _LOG_PATH is not None:
        return _LOG_PATH

    level = _resolve_level(level)
    target_dir = _resolve_log_dir(log_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    log_path = target_dir / _LOG_FILENAME

    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    _tune_external_loggers(level)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(level)

    _CONFIGURED = True
    _LOG_PATH = log_path
    return log_path


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``slidesync`` namespace."""

    if name != _PACKAGE_LOGGER and not name.startswith(_PACKAGE_LOGGER + "."):
        name = f"{_PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def get_log_path() -> Path | None:
    """Return the log file installed by :func:`setup_logging`, if any."""

    return _LOG_PATH


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    if log_dir is None:
        log_dir = os.environ.get(_LOG_DIR_ENV) or _DEFAULT_LOG_DIR
    return Path(log_dir).expanduser()


def _resolve_level(level: int | None) -> int:
    if level is not None:
        return level
    flag = os.environ.get(_DEBUG_ENV, "").strip().lower()
    return logging.DEBUG if flag in _TRUE_VALUES else logging.INFO


def _tune_external_loggers(root_level: int) -> None:
    quiet_level = logging.WARNING if root_level < logging.WARNING else root_level
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)
