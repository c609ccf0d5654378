"""
color_selector.py - Pick the primary / secondary colours that drive a background.

Two strategies, because the styles need different semantics:

  primary    brightest palette entry whose channel sum clears a threshold
             (near-black clusters are ignored); falls back to palette[0]
  secondary  most frequent exact pixel colour of the full-resolution image,
             skipping the white family and the black family; falls back to
             neutral gray (128, 128, 128)

Both are deterministic: ties go to the colour seen first.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from .colors import NEUTRAL_GRAY, Color, ColorPair, brightness, color_distance, unpack_rgb
from .errors import DegenerateInputWarning
from .palette import DEFAULT_MAX_COLORS, extract_palette, load_source_image

logger = logging.getLogger(__name__)

BRIGHTNESS_THRESHOLD = 300
WHITE_THRESHOLD = 200
BLACK_THRESHOLD = 50


# ── Primary ───────────────────────────────────────────────────────────────────

def select_primary(palette: Sequence[Color], brightness_threshold: int = BRIGHTNESS_THRESHOLD) -> Color:
    """Brightest palette colour whose channel sum is at least brightness_threshold."""
    if not palette:
        raise ValueError("palette is empty")

    primary: Optional[Color] = None
    max_brightness = -1
    for color in palette:
        value = brightness(color)
        if value < brightness_threshold:
            continue
        if value > max_brightness:
            max_brightness = value
            primary = tuple(color)

    if primary is None:
        warnings.warn(
            f"no palette colour reaches brightness {brightness_threshold}; using palette[0]",
            DegenerateInputWarning,
            stacklevel=2,
        )
        primary = tuple(palette[0])
    return primary


# ── Secondary ─────────────────────────────────────────────────────────────────

def _pixels(image: Image.Image) -> np.ndarray:
    """Row-major (N, 3) uint8 view of the image's pixels."""
    return np.asarray(image.convert("RGB"), dtype=np.uint8).reshape(-1, 3)


def most_used_color(
    image: Image.Image,
    white_threshold: int = WHITE_THRESHOLD,
    black_threshold: int = BLACK_THRESHOLD,
) -> Color:
    """
    Most frequent exact pixel colour outside the white and black families.

    A pixel is white-family when all three channels are >= white_threshold and
    black-family when all three are <= black_threshold.
    """
    pixels = _pixels(image)
    white = (pixels >= white_threshold).all(axis=1)
    black = (pixels <= black_threshold).all(axis=1)
    kept = pixels[~(white | black)].astype(np.uint32)

    if kept.size == 0:
        warnings.warn(
            "every pixel is in the white or black family; using neutral gray",
            DegenerateInputWarning,
            stacklevel=2,
        )
        return NEUTRAL_GRAY

    keys = (kept[:, 0] << 16) | (kept[:, 1] << 8) | kept[:, 2]
    unique, first_seen, counts = np.unique(keys, return_index=True, return_counts=True)
    # highest count first, then earliest occurrence
    order = np.lexsort((first_seen, -counts))
    return unpack_rgb(int(unique[order[0]]))


# ── Pairs & ranking ───────────────────────────────────────────────────────────

def select_color_pair(
    image: Image.Image,
    palette: Optional[Sequence[Color]] = None,
    max_colors: int = DEFAULT_MAX_COLORS,
    white_threshold: int = WHITE_THRESHOLD,
    black_threshold: int = BLACK_THRESHOLD,
) -> ColorPair:
    if palette is None:
        palette = extract_palette(image, max_colors)
    pair = ColorPair(
        primary=select_primary(palette),
        secondary=most_used_color(image, white_threshold, black_threshold),
    )
    logger.debug("Colour pair primary=%s secondary=%s", pair.primary, pair.secondary)
    return pair


def color_pair_from_path(
    path: Union[str, Path],
    max_colors: int = DEFAULT_MAX_COLORS,
    white_threshold: int = WHITE_THRESHOLD,
    black_threshold: int = BLACK_THRESHOLD,
) -> ColorPair:
    """Decode path and derive its ColorPair. Raises DecodeError."""
    img = load_source_image(path)
    try:
        return select_color_pair(
            img,
            max_colors=max_colors,
            white_threshold=white_threshold,
            black_threshold=black_threshold,
        )
    finally:
        img.close()


def rank_by_distance(palette: Sequence[Color], reference: Color) -> List[Color]:
    """Palette sorted from most to least different from reference (stable)."""
    return sorted(palette, key=lambda c: -color_distance(c, reference))


def most_different_color(palette: Sequence[Color], reference: Color) -> Color:
    """
    Palette entry furthest from reference by Manhattan distance.

    Used when a contrasting companion to the primary colour is needed.
    """
    if not palette:
        raise ValueError("palette is empty")
    return tuple(rank_by_distance(palette, reference)[0])


def average_color(image: Image.Image, box: Optional[Tuple[int, int, int, int]] = None) -> Color:
    """Mean colour of the image, or of box=(left, top, right, bottom) when given."""
    region = image.crop(box) if box else image
    pixels = _pixels(region)
    if pixels.size == 0:
        return (0, 0, 0)
    mean = pixels.mean(axis=0)
    return (int(mean[0]), int(mean[1]), int(mean[2]))
