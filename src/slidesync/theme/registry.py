"""Read-only theme registry used as the validation oracle for theme ids."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from ..errors import InvalidThemeError
from .catalog import CATALOG_VERSION, build_builtin_themes
from .models import Theme, ThemeCategory

LOGGER = logging.getLogger(__name__)


class ThemeRegistry:
    """Resolves theme ids to immutable :class:`Theme` records."""

    def __init__(self, themes: Iterable[Theme], *, default_id: str | None = None) -> None:
        self._themes: Dict[str, Theme] = {}
        for theme in themes:
            if theme.id in self._themes:
                raise ValueError(f"Theme '{theme.id}' registered twice")
            self._themes[theme.id] = theme
        if not self._themes:
            raise ValueError("A theme registry needs at least one theme")
        if default_id is not None:
            default_id = default_id.strip()
            if default_id not in self._themes:
                raise InvalidThemeError(default_id)
        self._default_id = default_id or next(iter(self._themes))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def resolve(self, theme_id: object) -> Theme | None:
        """Return the theme registered under ``theme_id`` or None."""

        if not isinstance(theme_id, str):
            return None
        return self._themes.get(theme_id.strip())

    def require(self, theme_id: object) -> Theme:
        theme = self.resolve(theme_id)
        if theme is None:
            raise InvalidThemeError(theme_id)
        return theme

    def is_valid(self, theme_id: object) -> bool:
        return self.resolve(theme_id) is not None

    def default(self) -> Theme:
        return self._themes[self._default_id]

    @property
    def default_id(self) -> str:
        return self._default_id

    def available(self) -> List[Theme]:
        return list(self._themes.values())

    def available_ids(self) -> List[str]:
        return list(self._themes)

    def by_category(self, category: ThemeCategory | str) -> List[Theme]:
        wanted = ThemeCategory.coerce(category)
        return [theme for theme in self._themes.values() if theme.category is wanted]

    def categories(self) -> List[ThemeCategory]:
        seen: list[ThemeCategory] = []
        for theme in self._themes.values():
            if theme.category not in seen:
                seen.append(theme.category)
        return seen

    def __contains__(self, theme_id: object) -> bool:
        return self.is_valid(theme_id)

    def __len__(self) -> int:
        return len(self._themes)

    # ------------------------------------------------------------------
    # Catalogue files
    # ------------------------------------------------------------------
    def export_catalog(self, destination: str | Path, *, indent: int = 2) -> Path:
        path = Path(destination)
        payload = {
            "version": CATALOG_VERSION,
            "default": self._default_id,
            "themes": [theme.to_dict() for theme in self._themes.values()],
        }
        path.write_text(json.dumps(payload, indent=indent), encoding="utf-8")
        return path

    @classmethod
    def from_catalog(cls, payload: Mapping[str, Any]) -> "ThemeRegistry":
        if not isinstance(payload, Mapping):
            raise ValueError("Theme catalogue must contain a JSON object")
        entries = payload.get("themes")
        if not isinstance(entries, list):
            raise ValueError("Theme catalogue is missing a 'themes' list")
        version = payload.get("version")
        if version != CATALOG_VERSION:
            LOGGER.warning(
                "Theme catalogue version %s differs from supported version %s",
                version,
                CATALOG_VERSION,
            )
        themes = [Theme.from_dict(entry) for entry in entries]
        default_id = payload.get("default")
        return cls(themes, default_id=default_id if isinstance(default_id, str) else None)

    @classmethod
    def from_file(cls, source: str | Path) -> "ThemeRegistry":
        path = Path(source)
        payload = json.loads(path.read_text(encoding="utf-8"))
        registry = cls.from_catalog(payload)
        LOGGER.debug("Loaded %d themes from %s", len(registry), path)
        return registry


_DEFAULT_REGISTRY: ThemeRegistry | None = None


def default_registry() -> ThemeRegistry:
    """Return the registry built from the built-in catalogue."""

    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = ThemeRegistry(build_builtin_themes())
    return _DEFAULT_REGISTRY


__all__ = ["ThemeRegistry", "default_registry"]
