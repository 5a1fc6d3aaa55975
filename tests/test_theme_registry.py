"""Tests for the theme registry."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from slidesync.errors import InvalidThemeError
from slidesync.theme import (
    CATALOG_VERSION,
    Theme,
    ThemeCategory,
    ThemeRegistry,
    build_builtin_themes,
    default_registry,
)


def _theme(theme_id: str, category: ThemeCategory = ThemeCategory.MODERN) -> Theme:
    return Theme(id=theme_id, name=theme_id.title(), category=category, palette={"primary": "#000"})


def test_builtin_catalogue_default_is_first_entry() -> None:
    registry = default_registry()

    assert registry.default_id == "corporate-blue"
    assert registry.default().name == "Corporate Professional"
    assert registry.available_ids()[0] == "corporate-blue"
    assert len(registry) == len(build_builtin_themes())


def test_builtin_ids_are_unique() -> None:
    ids = [theme.id for theme in build_builtin_themes()]

    assert len(ids) == len(set(ids))
    assert {"executive-dark", "modern-minimal", "creative-vibrant"} <= set(ids)


def test_resolve_and_validate() -> None:
    registry = default_registry()

    assert registry.resolve("modern-minimal") is not None
    assert registry.resolve(" modern-minimal ").id == "modern-minimal"
    assert registry.resolve("bogus") is None
    assert registry.resolve(None) is None
    assert registry.resolve(17) is None
    assert registry.is_valid("ocean-depth")
    assert not registry.is_valid("")
    assert "executive-dark" in registry
    assert "nope" not in registry


def test_require_raises_invalid_theme_error() -> None:
    with pytest.raises(InvalidThemeError) as excinfo:
        default_registry().require("bogus")

    assert excinfo.value.theme_id == "bogus"
    assert str(excinfo.value) == "Invalid theme ID: bogus"


def test_category_queries() -> None:
    registry = default_registry()

    modern = registry.by_category("modern")
    assert modern and all(theme.category is ThemeCategory.MODERN for theme in modern)
    assert ThemeCategory.CORPORATE in registry.categories()
    assert registry.by_category(ThemeCategory.FINANCE) == []


def test_explicit_default_and_validation() -> None:
    registry = ThemeRegistry([_theme("a"), _theme("b")], default_id="b")
    assert registry.default_id == "b"

    with pytest.raises(InvalidThemeError):
        ThemeRegistry([_theme("a")], default_id="missing")
    with pytest.raises(ValueError):
        ThemeRegistry([_theme("a"), _theme("a")])
    with pytest.raises(ValueError):
        ThemeRegistry([])


def test_export_and_load_catalogue(tmp_path: Path) -> None:
    source = ThemeRegistry([_theme("alpha"), _theme("beta", ThemeCategory.FINANCE)], default_id="beta")
    path = source.export_catalog(tmp_path / "catalog.json")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["version"] == CATALOG_VERSION
    assert payload["default"] == "beta"

    loaded = ThemeRegistry.from_file(path)
    assert loaded.available_ids() == ["alpha", "beta"]
    assert loaded.default_id == "beta"
    assert loaded.require("beta").category is ThemeCategory.FINANCE


def test_catalogue_version_mismatch_warns(caplog: pytest.LogCaptureFixture) -> None:
    payload = {"version": 99, "themes": [_theme("solo").to_dict()]}

    with caplog.at_level("WARNING"):
        registry = ThemeRegistry.from_catalog(payload)

    assert registry.default_id == "solo"
    assert "differs from supported version" in caplog.text


def test_catalogue_without_themes_is_rejected() -> None:
    with pytest.raises(ValueError):
        ThemeRegistry.from_catalog({"version": CATALOG_VERSION})
