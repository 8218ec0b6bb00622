"""Named CSS filter presets clients can apply to post images."""

from __future__ import annotations

from typing import Final

FILTERS: Final[tuple[tuple[str, str], ...]] = (
    ("Normal", ""),
    ("Clarendon", "contrast(1.2) saturate(1.35)"),
    ("Gingham", "brightness(1.05) hue-rotate(-10deg)"),
    ("Moon", "grayscale(1) contrast(1.1) brightness(1.1)"),
    ("Lark", "contrast(0.9) brightness(1.1) saturate(1.1)"),
    ("Reyes", "sepia(0.22) brightness(1.1) contrast(0.85) saturate(0.75)"),
    ("Juno", "contrast(1.15) saturate(1.8) sepia(0.1)"),
    ("Slumber", "saturate(0.66) brightness(1.05) sepia(0.15)"),
    ("Crema", "sepia(0.5) contrast(1.25) brightness(1.15) saturate(0.9) hue-rotate(-2deg)"),
    ("Ludwig", "sepia(0.25) contrast(1.05) brightness(1.05) saturate(2)"),
    ("Aden", "hue-rotate(-20deg) contrast(0.9) saturate(0.85) brightness(1.2)"),
    ("Perpetua", "contrast(1.1) brightness(1.25) saturate(1.1)"),
    ("Inkwell", "sepia(0.3) contrast(1.1) brightness(1.1) grayscale(1)"),
)


def list_filters() -> list[dict[str, str]]:
    """Return the presets as ``{name, filter}`` pairs."""
    return [{"name": name, "filter": css} for name, css in FILTERS]


def resolve_filter(name: str | None) -> str:
    """Return the CSS for a preset name, or an empty string if unknown."""
    if not name:
        return ""
    for preset, css in FILTERS:
        if preset == name:
            return css
    return ""
