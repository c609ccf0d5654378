"""
backgrounds.py - Procedural banner backgrounds driven by a ColorPair.

Every generator has the same shape:

    generator(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image

and returns a freshly allocated RGB image of exactly width × height.
Translucent shapes are blended onto the canvas one primitive at a time
(ImageDraw in RGBA mode over an RGB image), using GD-scale transparency.

Randomised parameters (wave bands, wave offset, pattern tint, stripe width,
burst rays, dot jitter) only ever come from the injected rng, so a seeded
random.Random reproduces a background exactly.

Usage:
    import random
    from adbanner.backgrounds import BackgroundStyle, render_background

    img = render_background("radial", pair, 1200, 200, random.Random(7))
"""

from __future__ import annotations

import logging
import math
import random
from enum import Enum
from typing import Callable, Dict, Optional, Union

import numpy as np
from PIL import Image, ImageDraw

from .colors import (
    BLACK,
    WHITE,
    Color,
    ColorPair,
    clamp_color,
    make_faint,
    mix,
    shift,
    translucent,
)

logger = logging.getLogger(__name__)

Generator = Callable[[ColorPair, int, int, random.Random], Image.Image]


class BackgroundStyle(str, Enum):
    WAVE = "wave"
    WAVE1 = "wave1"
    GRADIENT = "gradient"
    HORIZONTAL_GRADIENT = "horizontal-gradient"
    BLOCK = "block"
    ABSTRACT = "abstract"
    STRIPES = "stripes"
    RADIAL = "radial"
    SPOTLIGHT = "spotlight"
    GRID = "grid"
    BURST = "burst"
    MOBILE_DOTS = "mobile-dots"
    MOBILE_CARD = "mobile-card"
    MOBILE_DIAGONAL = "mobile-diagonal"
    MOBILE_FLAT = "mobile-flat"
    MEDICAL = "medical"
    MARKETING = "marketing"

    @classmethod
    def default(cls) -> "BackgroundStyle":
        return cls.WAVE

    @classmethod
    def parse(cls, name: Union[str, "BackgroundStyle", None]) -> "BackgroundStyle":
        """Map a style name onto the enumeration; unknown names fall back to wave."""
        if isinstance(name, cls):
            return name
        if name:
            try:
                return cls(str(name).strip().lower())
            except ValueError:
                logger.warning("Unknown background style %r, using %s", name, cls.default().value)
        return cls.default()


# ── Canvas helpers ────────────────────────────────────────────────────────────

def _canvas(width: int, height: int, fill: Color) -> Image.Image:
    return Image.new("RGB", (width, height), fill)


def _blend_draw(img: Image.Image) -> ImageDraw.ImageDraw:
    """Draw handle that alpha-blends RGBA fills onto an RGB canvas."""
    return ImageDraw.Draw(img, "RGBA")


def _from_array(arr: np.ndarray) -> Image.Image:
    return Image.fromarray(np.clip(arr, 0, 255).astype(np.uint8))


def vertical_gradient(width: int, height: int, start: Color, end: Color) -> Image.Image:
    """Row-by-row interpolation start (top) → end (bottom)."""
    ratio = (np.arange(height, dtype=np.float64) / height)[:, None]
    start_arr = np.array(start, dtype=np.float64)
    end_arr = np.array(end, dtype=np.float64)
    rows = start_arr + (end_arr - start_arr) * ratio          # (H, 3)
    arr = np.broadcast_to(rows[:, None, :], (height, width, 3))
    return _from_array(np.floor(arr))


def _distance_from_center(width: int, height: int) -> np.ndarray:
    yy, xx = np.mgrid[0:height, 0:width].astype(np.float64)
    return np.sqrt((xx - width / 2) ** 2 + (yy - height / 2) ** 2)


# ── Waves ─────────────────────────────────────────────────────────────────────

def _wave_y(x: int, width: int, amplitude: float, frequency: float, phase: float, offset: float) -> float:
    return math.sin((x + phase) * frequency / width * 2 * math.pi) * amplitude + offset


def _add_wave_bands(
    img: Image.Image,
    colors: ColorPair,
    rng: random.Random,
    bands: int = 5,
) -> None:
    """Overlay thin translucent sine bands in a jittered primary/secondary blend."""
    width, height = img.size
    draw = _blend_draw(img)
    midpoint = [(p + s) / 2 for p, s in zip(colors.primary, colors.secondary)]

    for _ in range(bands):
        band_color = clamp_color(c + rng.randint(-25, 25) for c in midpoint)
        fill = translucent(band_color, rng.randint(70, 100))

        amplitude = rng.randint(height // 12, max(height // 12, height // 5))
        frequency = rng.randint(1, 4)
        phase = rng.randint(0, width)
        y_offset = rng.randint(height // 5, max(height // 5, height * 4 // 5))
        thickness = rng.randint(1, 4)

        for x in range(width):
            y = _wave_y(x, width, amplitude, frequency, phase, y_offset)
            y1 = max(0, int(y - thickness / 2))
            y2 = min(height - 1, int(y + thickness / 2))
            if y1 < y2:
                draw.line([(x, y1), (x, y2)], fill=fill)


def seamless_wave_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Vertical primary → secondary gradient crossed by five random sine bands."""
    img = vertical_gradient(width, height, colors.primary, colors.secondary)
    _add_wave_bands(img, colors, rng)
    return img


def joined_wave_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Faint primary field split by one sine wave, filled below in faint secondary."""
    top = make_faint(colors.primary)
    bottom = make_faint(colors.secondary)
    img = _canvas(width, height, top)
    draw = ImageDraw.Draw(img)

    offset = rng.randint(30, max(30, height // 2))
    for x in range(width):
        y = int(_wave_y(x, width, amplitude=40, frequency=1, phase=100, offset=offset))
        draw.line([(x, y), (x, height)], fill=bottom)
    return img


# ── Gradients ─────────────────────────────────────────────────────────────────

def gradient_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    return vertical_gradient(width, height, colors.primary, colors.secondary)


def horizontal_gradient_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Light primary at both edges, darker primary in the middle."""
    light = np.minimum(255.0, np.array(colors.primary, dtype=np.float64) * 2.1)
    dark = np.minimum(255.0, np.array(colors.primary, dtype=np.float64) * 1.2)

    half = width / 2
    x = np.arange(width, dtype=np.float64)
    t = np.minimum(x / half, 1 - (x - half) / half)[:, None]     # (W, 1)
    cols = light * (1 - t) + dark * t                              # (W, 3)
    arr = np.broadcast_to(cols[None, :, :], (height, width, 3))
    return _from_array(np.floor(arr))


def radial_gradient_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Primary at the centre easing into a lightened secondary at the corners."""
    outer = np.array(make_faint(colors.secondary, 0.2), dtype=np.float64)
    inner = np.array(colors.primary, dtype=np.float64)

    max_distance = math.sqrt(width ** 2 + height ** 2) / 2
    ratio = (_distance_from_center(width, height) / max_distance)[:, :, None]
    return _from_array(np.floor(inner + (outer - inner) * ratio))


def spotlight_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Primary gradient with a soft, squared-falloff glow in the centre for text."""
    base = vertical_gradient(width, height, colors.primary, make_faint(colors.primary, 0.3))
    arr = np.asarray(base, dtype=np.float64).copy()

    radius = min(width, height) * 0.4
    if radius <= 0:
        return base
    distance = _distance_from_center(width, height)
    intensity = np.where(distance < radius, (1 - distance / radius) ** 2, 0.0)[:, :, None]
    spot = np.array(make_faint(colors.secondary, 0.7), dtype=np.float64)
    return _from_array(np.floor(arr * (1 - intensity) + spot * intensity))


# ── Flat fills & patterns ─────────────────────────────────────────────────────

def solid_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    return _canvas(width, height, colors.primary)


def abstract_pattern_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """
    Pale blue base, a primary wash, then a 6×3 grid of shapes chosen by cell parity:
    even cells are filled rectangles, odd cells a diagonal, every third cell
    also gets a downward triangle. Three horizontal dividers finish it.
    """
    img = _canvas(width, height, (204, 230, 255))
    draw = _blend_draw(img)
    draw.rectangle([0, 0, width, height], fill=translucent(colors.primary, 90))

    tint = clamp_color(c + rng.randint(-30, 30) for c in colors.primary)
    shape_fill = translucent(tint, 120)

    columns, rows = 6, 3
    cell_w = width / columns
    cell_h = height / rows
    for row in range(rows):
        for col in range(columns):
            x1 = col * cell_w
            y1 = row * cell_h
            if (row + col) % 2 == 0:
                draw.rectangle([x1, y1, x1 + cell_w, y1 + cell_h], fill=shape_fill)
            else:
                draw.line([(x1, y1), (x1 + cell_w, y1 + cell_h)], fill=shape_fill)

            if (row + col) % 3 == 0:
                draw.polygon(
                    [(x1, y1), (x1 + cell_w, y1), (x1 + cell_w / 2, y1 + cell_h / 2)],
                    fill=shape_fill,
                )

    for i in range(3):
        y = (i + 1) * (height / 4)
        draw.line([(0, y), (width, y)], fill=shape_fill)
    return img


def diagonal_stripes_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Primary field tiled with thick 45° stripes in lighter / darker secondary."""
    img = _canvas(width, height, colors.primary)
    draw = _blend_draw(img)
    light = translucent(shift(colors.secondary, 20), 90)
    dark = translucent(shift(colors.secondary, -20), 100)

    stripe = rng.randint(20, 50)
    for x in range(-height, width, stripe * 2):
        draw.line([(x, 0), (x + height, height)], fill=light, width=stripe)
        draw.line([(x + stripe, 0), (x + stripe + height, height)], fill=dark, width=stripe)
    return img


def grid_pattern_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Very light primary with a darker primary grid (20px rows, 40px columns)."""
    img = _canvas(width, height, make_faint(colors.primary, 0.7))
    draw = _blend_draw(img)
    line = translucent(shift(colors.primary, -30), 70)

    for y in range(0, height, 20):
        draw.line([(0, y), (width, y)], fill=line)
    for x in range(0, width, 40):
        draw.line([(x, 0), (x, height)], fill=line)
    return img


def burst_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Faint gradient with 15–25 rays fanning out of each corner."""
    img = vertical_gradient(
        width, height,
        make_faint(colors.primary, 0.4),
        make_faint(colors.secondary, 0.6),
    )
    draw = _blend_draw(img)
    ray = translucent(colors.secondary, 80)

    max_length = math.hypot(width, height) * 0.7
    corners = [(0, 0), (width, 0), (0, height), (width, height)]
    for cx, cy in corners:
        count = rng.randint(15, 25)
        for i in range(count):
            angle = 2 * math.pi * i / count
            length = max_length * (0.5 + rng.randint(0, 100) / 100 * 0.5)
            end = (cx + math.cos(angle) * length, cy + math.sin(angle) * length)
            draw.line([(cx, cy), end], fill=ray, width=rng.randint(1, 3))
    return img


def dots_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Near-white primary tint under a loosely jittered grid of secondary dots."""
    img = _canvas(width, height, make_faint(colors.primary, 0.8))
    draw = _blend_draw(img)
    dot = translucent(colors.secondary, 40)

    spacing, radius = 30, 3
    for y in range(spacing, height, spacing):
        for x in range(spacing, width, spacing):
            px = x + rng.randint(-3, 3)
            py = y + rng.randint(-3, 3)
            draw.ellipse([px - radius, py - radius, px + radius, py + radius], fill=dot)
    return img


def material_card_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Light gray page holding a faint primary card with a stepped shadow and accent bar."""
    img = _canvas(width, height, (245, 245, 245))
    draw = _blend_draw(img)

    margin = 5
    x1, y1 = margin, margin
    x2, y2 = max(x1, width - margin), max(y1, height - margin)
    draw.rectangle([x1, y1, x2, y2], fill=make_faint(colors.primary, 0.5))

    shadow = translucent(BLACK, 110)
    for offset in range(1, 6):
        draw.rectangle([x1 + offset, y1 + offset, x2 + offset, y2 + offset], outline=shadow)

    draw.rectangle([x1, y1, x2, y1 + 15], fill=colors.primary)
    return img


def diagonal_mobile_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Faint two-colour gradient with sparse diagonals scaled to the short side."""
    img = vertical_gradient(
        width, height,
        make_faint(colors.primary, 0.5),
        make_faint(colors.secondary, 0.5),
    )
    draw = _blend_draw(img)
    stripe = translucent(shift(colors.secondary, -20), 100)

    spacing = max(1, math.ceil(min(width, height) / 20))
    thickness = max(1, math.ceil(spacing / 3))
    for i in range(-height, width + height, spacing * 3):
        draw.line([(i, 0), (i + height, height)], fill=stripe, width=thickness)
    return img


def flat_bars_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Primary field with five translucent bars stepping from primary to secondary."""
    img = _canvas(width, height, colors.primary)
    draw = _blend_draw(img)

    bars = 5
    bar_height = height / 15
    for i in range(bars):
        fill = translucent(mix(colors.primary, colors.secondary, i / (bars - 1)), 70)
        y = i * (height / (bars + 1))
        draw.rectangle([0, y, width, y + bar_height], fill=fill)
    return img


def medical_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Pale primary → secondary gradient, fine primary diagonals and a soft corner circle."""
    img = vertical_gradient(width, height, make_faint(colors.primary, 0.7), colors.secondary)
    draw = _blend_draw(img)

    line = translucent(colors.primary, 80)
    for i in range(-height, width, 50):
        draw.line([(i, 0), (i + height, height)], fill=line)

    radius = height / 3
    cx, cy = width - radius, radius
    draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=translucent(colors.secondary, 90))
    return img


def marketing_background(colors: ColorPair, width: int, height: int, rng: random.Random) -> Image.Image:
    """Agency-style split: slanted primary block, white divider, secondary block."""
    img = _canvas(width, height, WHITE)
    draw = ImageDraw.Draw(img)

    near, far = width * 0.35, width * 0.45
    draw.polygon([(0, 0), (far, 0), (near, height), (0, height)], fill=colors.primary)
    draw.polygon([(near, 0), (width, 0), (width, height), (far, height)], fill=colors.secondary)
    # crossed white divider between the two blocks
    draw.polygon([(near, 0), (far, 0), (near, height), (far, height)], fill=WHITE)
    return img


# ── Dispatch ──────────────────────────────────────────────────────────────────

GENERATORS: Dict[BackgroundStyle, Generator] = {
    BackgroundStyle.WAVE:                seamless_wave_background,
    BackgroundStyle.WAVE1:               joined_wave_background,
    BackgroundStyle.GRADIENT:            gradient_background,
    BackgroundStyle.HORIZONTAL_GRADIENT: horizontal_gradient_background,
    BackgroundStyle.BLOCK:               solid_background,
    BackgroundStyle.ABSTRACT:            abstract_pattern_background,
    BackgroundStyle.STRIPES:             diagonal_stripes_background,
    BackgroundStyle.RADIAL:              radial_gradient_background,
    BackgroundStyle.SPOTLIGHT:           spotlight_background,
    BackgroundStyle.GRID:                grid_pattern_background,
    BackgroundStyle.BURST:               burst_background,
    BackgroundStyle.MOBILE_DOTS:         dots_background,
    BackgroundStyle.MOBILE_CARD:         material_card_background,
    BackgroundStyle.MOBILE_DIAGONAL:     diagonal_mobile_background,
    BackgroundStyle.MOBILE_FLAT:         flat_bars_background,
    BackgroundStyle.MEDICAL:             medical_background,
    BackgroundStyle.MARKETING:           marketing_background,
}


def render_background(
    style: Union[str, BackgroundStyle, None],
    colors: ColorPair,
    width: int,
    height: int,
    rng: Optional[random.Random] = None,
) -> Image.Image:
    """
    Render the named background style.

    Args:
        style:  Style name or BackgroundStyle; unknown names render the wave style.
        colors: Primary / secondary pair.
        width:  Canvas width in pixels (> 0).
        height: Canvas height in pixels (> 0).
        rng:    Random source for the stochastic styles (unseeded if omitted).

    Returns:
        New RGB image of exactly width × height.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"canvas must be positive, got {width}x{height}")

    resolved = BackgroundStyle.parse(style)
    generator = GENERATORS[resolved]
    logger.debug("Rendering %s background %dx%d", resolved.value, width, height)
    return generator(colors, width, height, rng or random.Random())
