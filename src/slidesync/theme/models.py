"""Data structures describing presentation themes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Sequence, Tuple

ColorTuple = Tuple[int, int, int]
PaletteLike = Mapping[str, Any] | Sequence[tuple[str, Any]]


class ThemeCategory(str, Enum):
    """Broad grouping used by theme galleries."""

    CORPORATE = "corporate"
    CREATIVE = "creative"
    ACADEMIC = "academic"
    STARTUP = "startup"
    HEALTHCARE = "healthcare"
    FINANCE = "finance"
    CONSULTING = "consulting"
    TECHNOLOGY = "technology"
    MODERN = "modern"
    VIBRANT = "vibrant"
    NATURAL = "natural"

    @classmethod
    def coerce(cls, value: "ThemeCategory | str") -> "ThemeCategory":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown theme category: {value!r}") from exc


def _clamp_channel(value: Any) -> int:
    channel = int(value)
    if channel < 0:
        return 0
    if channel > 255:
        return 255
    return channel


def normalize_color(value: Any) -> ColorTuple:
    """Convert ``value`` into an RGB tuple, accepting hex strings or sequences."""

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Color strings cannot be empty")
        if text.startswith("#"):
            text = text[1:]
        if "," in text:
            parts = [part.strip() for part in text.split(",") if part.strip()]
            if len(parts) != 3:
                raise ValueError(f"Color '{value}' must have exactly 3 components")
            return tuple(_clamp_channel(int(part, 0)) for part in parts)  # type: ignore[return-value]
        if len(text) in (3, 6):
            if len(text) == 3:
                text = "".join(ch * 2 for ch in text)
            return tuple(int(text[i : i + 2], 16) for i in range(0, 6, 2))  # type: ignore[return-value]
        raise ValueError(f"Unsupported color format: {value!r}")

    if isinstance(value, Sequence):
        items = list(value)
        if len(items) != 3:
            raise ValueError(f"RGB sequences must contain 3 values, received {value!r}")
        return tuple(_clamp_channel(component) for component in items)  # type: ignore[return-value]

    raise TypeError(f"Cannot convert {type(value)!r} to an RGB color")


def _normalize_palette(palette: PaletteLike | None) -> Dict[str, ColorTuple]:
    normalized: Dict[str, ColorTuple] = {}
    if palette is None:
        return normalized
    items: Sequence[tuple[str, Any]]
    if isinstance(palette, Mapping):
        items = list(palette.items())
    else:
        items = list(palette)
    for key, value in items:
        if key is None:
            continue
        normalized[key.strip().lower()] = normalize_color(value)
    return normalized


def _tuple_to_hex(value: ColorTuple) -> str:
    return "#" + "".join(f"{component:02x}" for component in value)


@dataclass(frozen=True, slots=True)
class TypographySpec:
    """Font families and size scales for headings and body copy."""

    heading_font: str = "Inter, system-ui, sans-serif"
    body_font: str = "Inter, system-ui, sans-serif"
    heading_weights: tuple[int, ...] = (400, 500, 600, 700, 800)
    body_weights: tuple[int, ...] = (400, 500, 600)
    heading_sizes: Mapping[str, int] = field(
        default_factory=lambda: {"display": 56, "h1": 42, "h2": 32, "h3": 24, "h4": 20}
    )
    body_sizes: Mapping[str, int] = field(
        default_factory=lambda: {"large": 20, "medium": 16, "small": 14, "caption": 12}
    )
    heading_line_height: float = 1.1
    body_line_height: float = 1.6
    heading_letter_spacing: str = "-0.02em"
    body_letter_spacing: str = "0.01em"

    def __post_init__(self) -> None:
        object.__setattr__(self, "heading_weights", tuple(int(w) for w in self.heading_weights))
        object.__setattr__(self, "body_weights", tuple(int(w) for w in self.body_weights))
        object.__setattr__(self, "heading_sizes", MappingProxyType(dict(self.heading_sizes)))
        object.__setattr__(self, "body_sizes", MappingProxyType(dict(self.body_sizes)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "heading_font": self.heading_font,
            "body_font": self.body_font,
            "heading_weights": list(self.heading_weights),
            "body_weights": list(self.body_weights),
            "heading_sizes": dict(self.heading_sizes),
            "body_sizes": dict(self.body_sizes),
            "heading_line_height": self.heading_line_height,
            "body_line_height": self.body_line_height,
            "heading_letter_spacing": self.heading_letter_spacing,
            "body_letter_spacing": self.body_letter_spacing,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "TypographySpec":
        if not payload:
            return cls()
        allowed = set(cls.__dataclass_fields__)
        return cls(**{key: value for key, value in payload.items() if key in allowed})


@dataclass(frozen=True, slots=True)
class EffectSpec:
    """Corner radius, shadow and gradient tokens."""

    border_radius: int = 12
    shadows: Mapping[str, str] = field(default_factory=dict)
    gradients: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "border_radius", int(self.border_radius))
        object.__setattr__(self, "shadows", MappingProxyType(dict(self.shadows)))
        object.__setattr__(self, "gradients", MappingProxyType(dict(self.gradients)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "border_radius": self.border_radius,
            "shadows": dict(self.shadows),
            "gradients": dict(self.gradients),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "EffectSpec":
        if not payload:
            return cls()
        return cls(
            border_radius=payload.get("border_radius", 12),
            shadows=payload.get("shadows") or {},
            gradients=payload.get("gradients") or {},
        )


@dataclass(frozen=True, slots=True)
class Theme:
    """Immutable presentation theme record, looked up by ``id``."""

    id: str
    name: str
    category: ThemeCategory
    palette: Mapping[str, ColorTuple] = field(default_factory=dict)
    description: str = ""
    typography: TypographySpec = field(default_factory=TypographySpec)
    effects: EffectSpec = field(default_factory=EffectSpec)

    def __post_init__(self) -> None:
        theme_id = (self.id or "").strip()
        if not theme_id:
            raise ValueError("Theme id cannot be empty")
        object.__setattr__(self, "id", theme_id)
        object.__setattr__(self, "name", (self.name or theme_id).strip())
        object.__setattr__(self, "category", ThemeCategory.coerce(self.category))
        object.__setattr__(self, "palette", MappingProxyType(_normalize_palette(self.palette)))

    def color(self, key: str, fallback: ColorTuple | None = None) -> ColorTuple:
        lookup = key.strip().lower()
        if lookup in self.palette:
            return self.palette[lookup]
        if fallback is not None:
            return fallback
        if not self.palette:
            raise KeyError(f"Theme '{self.id}' has no palette entries")
        first_key = next(iter(self.palette))
        return self.palette[first_key]

    def as_css_hex(self, key: str, fallback: str | None = None) -> str:
        try:
            value = self.color(key)
        except KeyError:
            if fallback is None:
                raise
            return fallback
        return _tuple_to_hex(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "description": self.description,
            "palette": {key: _tuple_to_hex(value) for key, value in self.palette.items()},
            "typography": self.typography.to_dict(),
            "effects": self.effects.to_dict(),
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Theme":
        if not isinstance(payload, Mapping):
            raise TypeError("Theme payload must be a mapping")
        return cls(
            id=str(payload.get("id") or ""),
            name=str(payload.get("name") or ""),
            category=payload.get("category") or ThemeCategory.MODERN,
            palette=payload.get("palette") or {},
            description=str(payload.get("description") or ""),
            typography=TypographySpec.from_dict(payload.get("typography")),
            effects=EffectSpec.from_dict(payload.get("effects")),
        )

    @classmethod
    def from_json(cls, text: str) -> "Theme":
        return cls.from_dict(json.loads(text))


__all__ = [
    "ColorTuple",
    "EffectSpec",
    "Theme",
    "ThemeCategory",
    "TypographySpec",
    "normalize_color",
]
