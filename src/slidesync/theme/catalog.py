"""Built-in presentation theme catalogue.

The first entry is the registry default. Adding or removing entries is a
release-time change; the runtime only ever looks themes up by id.
"""

from __future__ import annotations

from typing import Mapping

from .models import EffectSpec, Theme, ThemeCategory, TypographySpec

CATALOG_VERSION = 2


def _effects_for(palette: Mapping[str, str]) -> EffectSpec:
    primary = palette["primary"]
    secondary = palette["secondary"]
    accent = palette["accent"]
    background = palette["background"]
    surface = palette["surface"]
    return EffectSpec(
        border_radius=12,
        shadows={
            "subtle": "0 2px 4px rgba(0, 0, 0, 0.06)",
            "medium": "0 6px 12px rgba(0, 0, 0, 0.12)",
            "strong": "0 12px 24px rgba(0, 0, 0, 0.15)",
            "colored": f"0 6px 12px {primary}25",
            "glow": f"0 0 16px {accent}35",
            "elevated": "0 16px 32px rgba(0, 0, 0, 0.12)",
        },
        gradients={
            "primary": f"linear-gradient(135deg, {primary} 0%, {secondary} 100%)",
            "secondary": f"linear-gradient(135deg, {secondary} 0%, {accent} 100%)",
            "accent": f"linear-gradient(135deg, {accent} 0%, {accent}CC 100%)",
            "background": f"linear-gradient(135deg, {background} 0%, {surface} 100%)",
            "subtle": f"linear-gradient(180deg, {surface} 0%, {background} 100%)",
            "vibrant": f"linear-gradient(45deg, {accent} 0%, {primary} 100%)",
        },
    )


def _build(
    theme_id: str,
    name: str,
    category: ThemeCategory,
    description: str,
    palette: Mapping[str, str],
    *,
    typography: TypographySpec | None = None,
) -> Theme:
    return Theme(
        id=theme_id,
        name=name,
        category=category,
        description=description,
        palette=palette,
        typography=typography or TypographySpec(),
        effects=_effects_for(palette),
    )


def build_builtin_themes() -> list[Theme]:
    """Return fresh instances of every built-in theme, default first."""

    return [
        _build(
            "corporate-blue",
            "Corporate Professional",
            ThemeCategory.CORPORATE,
            "Clean, trustworthy theme for business presentations.",
            {
                "primary": "#1E40AF",
                "secondary": "#3B82F6",
                "accent": "#F59E0B",
                "background": "#FFFFFF",
                "surface": "#F8FAFC",
                "text_primary": "#1F2937",
                "text_secondary": "#6B7280",
                "text_muted": "#9CA3AF",
                "border": "#E5E7EB",
            },
        ),
        _build(
            "executive-dark",
            "Modern Executive",
            ThemeCategory.CORPORATE,
            "Premium dark theme for executive briefings.",
            {
                "primary": "#1E40AF",
                "secondary": "#6366F1",
                "accent": "#10B981",
                "background": "#0F172A",
                "surface": "#1E293B",
                "text_primary": "#FFFFFF",
                "text_secondary": "#E2E8F0",
                "text_muted": "#CBD5E1",
                "border": "#475569",
            },
        ),
        _build(
            "consulting-charcoal",
            "Premium Consulting",
            ThemeCategory.CONSULTING,
            "Sophisticated charcoal theme for consulting decks.",
            {
                "primary": "#111827",
                "secondary": "#374151",
                "accent": "#F59E0B",
                "background": "#FFFFFF",
                "surface": "#F9FAFB",
                "text_primary": "#111827",
                "text_secondary": "#374151",
                "text_muted": "#6B7280",
                "border": "#E5E7EB",
            },
        ),
        _build(
            "ocean-depth",
            "Ocean Depth",
            ThemeCategory.MODERN,
            "Modern blue theme with high readability.",
            {
                "primary": "#0F172A",
                "secondary": "#1E293B",
                "accent": "#06B6D4",
                "background": "#F8FAFC",
                "surface": "#F1F5F9",
                "text_primary": "#0F172A",
                "text_secondary": "#475569",
                "text_muted": "#64748B",
                "border": "#E2E8F0",
            },
        ),
        _build(
            "emerald-professional",
            "Emerald Professional",
            ThemeCategory.NATURAL,
            "Fresh green theme with strong contrast.",
            {
                "primary": "#065F46",
                "secondary": "#047857",
                "accent": "#F59E0B",
                "background": "#FFFFFF",
                "surface": "#F0FDF4",
                "text_primary": "#064E3B",
                "text_secondary": "#047857",
                "text_muted": "#6B7280",
                "border": "#DCFCE7",
            },
        ),
        _build(
            "midnight-blue",
            "Midnight Blue",
            ThemeCategory.MODERN,
            "Elegant dark theme for evening keynotes.",
            {
                "primary": "#1E3A8A",
                "secondary": "#3B82F6",
                "accent": "#F97316",
                "background": "#0F172A",
                "surface": "#1E293B",
                "text_primary": "#F8FAFC",
                "text_secondary": "#CBD5E1",
                "text_muted": "#94A3B8",
                "border": "#475569",
            },
        ),
        _build(
            "modern-minimal",
            "Modern Minimal",
            ThemeCategory.MODERN,
            "Quiet monochrome layout with a single accent.",
            {
                "primary": "#18181B",
                "secondary": "#3F3F46",
                "accent": "#2563EB",
                "background": "#FFFFFF",
                "surface": "#FAFAFA",
                "text_primary": "#18181B",
                "text_secondary": "#52525B",
                "text_muted": "#A1A1AA",
                "border": "#E4E4E7",
            },
            typography=TypographySpec(heading_weights=(300, 400, 600), heading_letter_spacing="-0.03em"),
        ),
        _build(
            "creative-vibrant",
            "Creative Vibrant",
            ThemeCategory.CREATIVE,
            "Bold purple and pink palette for pitches and workshops.",
            {
                "primary": "#7C3AED",
                "secondary": "#EC4899",
                "accent": "#F59E0B",
                "background": "#FEFEFE",
                "surface": "#FAF5FF",
                "text_primary": "#1F2937",
                "text_secondary": "#6B7280",
                "text_muted": "#9CA3AF",
                "border": "#E5E7EB",
            },
        ),
    ]


__all__ = ["CATALOG_VERSION", "build_builtin_themes"]
