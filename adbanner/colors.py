"""
colors.py - Stateless colour math shared by the selector and the generators.

Colors are plain (R, G, B) tuples. Translucent fills use the GD transparency
scale the drawing recipes were tuned with: 0 = opaque, 127 = invisible.

Usage:
    from adbanner.colors import make_faint, translucent, ColorPair

    base  = make_faint((200, 40, 40), 0.5)
    fill  = translucent((200, 40, 40), 90)    # → (200, 40, 40, 75) RGBA
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

Color = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)
NEUTRAL_GRAY: Color = (128, 128, 128)

MAX_TRANSPARENCY = 127


@dataclass(frozen=True)
class ColorPair:
    """The two colours driving a background: dominant primary + most-used secondary."""
    primary: Color
    secondary: Color


# ── Channel helpers ───────────────────────────────────────────────────────────

def clamp(value: float) -> int:
    return max(0, min(255, int(value)))


def clamp_color(channels: Iterable[float]) -> Color:
    r, g, b = (clamp(c) for c in channels)
    return (r, g, b)


def unpack_rgb(value: int) -> Color:
    """Split a packed 0xRRGGBB integer into channels."""
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def brightness(color: Color) -> int:
    """Plain channel sum, the measure used for primary-colour selection."""
    return sum(color)


def luminance(color: Color) -> float:
    return 0.299 * color[0] + 0.587 * color[1] + 0.114 * color[2]


def is_dark(color: Color) -> bool:
    return luminance(color) < 128


def to_hex(color: Color) -> str:
    return "#{:02X}{:02X}{:02X}".format(*color)


# ── Blends ────────────────────────────────────────────────────────────────────

def make_faint(color: Color, blend_factor: float = 0.3) -> Color:
    """Blend toward white: 0.0 keeps the colour, 1.0 gives pure white."""
    return clamp_color(c + (255 - c) * blend_factor for c in color)


def shift(color: Color, delta: int) -> Color:
    """Add delta to every channel, clamped."""
    return clamp_color(c + delta for c in color)


def mix(start: Color, end: Color, ratio: float) -> Color:
    """Linear interpolation start → end, ratio in [0, 1]."""
    return clamp_color(s + (e - s) * ratio for s, e in zip(start, end))


def color_distance(a: Color, b: Color) -> int:
    """Manhattan distance in RGB space."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) + abs(a[2] - b[2])


def translucent(color: Color, transparency: int) -> RGBA:
    """RGBA fill for a GD-scale transparency (0 opaque … 127 invisible)."""
    t = max(0, min(MAX_TRANSPARENCY, transparency))
    alpha = round(255 * (MAX_TRANSPARENCY - t) / MAX_TRANSPARENCY)
    r, g, b = clamp_color(color)
    return (r, g, b, alpha)
