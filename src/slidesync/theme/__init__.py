"""Theme records, the built-in catalogue, and the read-only registry."""

from .catalog import CATALOG_VERSION, build_builtin_themes
from .models import ColorTuple, EffectSpec, Theme, ThemeCategory, TypographySpec, normalize_color
from .registry import ThemeRegistry, default_registry

__all__ = [
    "CATALOG_VERSION",
    "ColorTuple",
    "EffectSpec",
    "Theme",
    "ThemeCategory",
    "ThemeRegistry",
    "TypographySpec",
    "build_builtin_themes",
    "default_registry",
    "normalize_color",
]
