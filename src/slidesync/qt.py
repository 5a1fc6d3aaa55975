"""Optional Qt host integration.

PySide6 and qasync are only imported when these helpers are used, so the
core package stays importable in headless environments.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, cast

from .errors import StorageUnavailableError
from .storage.backends import KeyValueBackend

__all__ = ["QSettingsBackend", "QtRuntime", "create_qt_loop"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class QtRuntime:
    """Container for the Qt application and its asyncio-compatible loop."""

    app: Any
    loop: asyncio.AbstractEventLoop


def create_qt_loop(app: Any | None = None, *, application_name: str = "slidesync") -> QtRuntime:
    """Install a qasync event loop bound to ``app`` (created when omitted)."""

    try:  # Local import to avoid mandatory PySide6 dependency at import time.
        from PySide6.QtWidgets import QApplication
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError("PySide6 must be installed to host theme sync in Qt.") from exc

    try:
        from qasync import QEventLoop
    except ImportError as exc:  # pragma: no cover - depends on env setup
        raise RuntimeError("qasync is required to run the async Qt event loop.") from exc

    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    if app is None:
        app = cast(Any, QApplication.instance() or QApplication(sys.argv))
        app.setApplicationName(application_name)

    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    try:
        app.aboutToQuit.connect(loop.stop)  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - in case of mock QApplication
        pass
    return QtRuntime(app=app, loop=loop)


class QSettingsBackend(KeyValueBackend):
    """Key/value backend stored in ``QSettings``.

    Pass ``path`` to use an INI file instead of the platform's native
    settings location.
    """

    name = "qt"

    def __init__(
        self,
        organization: str = "slidesync",
        application: str = "slidesync",
        *,
        path: Path | str | None = None,
        group: str | None = "themes",
    ) -> None:
        try:
            from PySide6.QtCore import QSettings
        except ImportError as exc:  # pragma: no cover - depends on desktop stack
            raise RuntimeError("PySide6 must be installed to use QSettingsBackend.") from exc

        self._settings_type = QSettings
        if path is not None:
            self._settings = QSettings(str(path), QSettings.Format.IniFormat)
        else:
            self._settings = QSettings(organization, application)
        self._group = group

    @property
    def settings(self) -> Any:
        return self._settings

    def get_item(self, key: str) -> str | None:
        value = self._settings.value(self._qualify(key))
        self._check_status("get", key)
        if value is None:
            return None
        return str(value)

    def set_item(self, key: str, value: str) -> None:
        self._settings.setValue(self._qualify(key), value)
        self._settings.sync()
        self._check_status("set", key)

    def remove_item(self, key: str) -> None:
        self._settings.remove(self._qualify(key))
        self._settings.sync()
        self._check_status("remove", key)

    def keys(self) -> List[str]:
        prefix = f"{self._group}/" if self._group else ""
        return [
            key[len(prefix):]
            for key in self._settings.allKeys()
            if key.startswith(prefix)
        ]

    def _qualify(self, key: str) -> str:
        return f"{self._group}/{key}" if self._group else key

    def _check_status(self, operation: str, key: str) -> None:
        status = self._settings.status()
        if status == self._settings_type.Status.NoError:
            return
        LOGGER.debug("QSettings reported %s during %s %s", status, operation, key)
        raise StorageUnavailableError(
            f"QSettings {operation} failed: {status}", key=key, operation=operation
        )
