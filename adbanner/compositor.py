"""
compositor.py - Resize source photos and place them onto a rendered background.

Each banner shape has a fixed layout: canvas size, one placement rectangle
per source image, the caption box and the background style it uses when the
caller does not pick one.

  horizontal  1200×200   ┌──────┬─────────── caption ───────────┬──────┐
                         │ img1 │                                │ img2 │
                         └──────┴────────────────────────────────┴──────┘

  vertical     345×300   ┌──────┬──────┐     block   300×300   ┌────────┐
                         │ img1 │ img2 │                        │  img   │
                         ├──────┴──────┤                        │        │
                         │   caption   │                        │caption │
                         └─────────────┘                        └────────┘

Rectangles are (x, y, w, h); anything past the canvas edge is clipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Tuple, Union

from PIL import Image

from .backgrounds import BackgroundStyle
from .palette import load_source_image

logger = logging.getLogger(__name__)

Rect = Tuple[int, int, int, int]


class BannerShape(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BLOCK = "block"


@dataclass(frozen=True)
class LayoutSpec:
    canvas: Tuple[int, int]
    image_slots: Tuple[Rect, ...]
    caption_box: Rect
    default_style: BackgroundStyle


LAYOUTS: Dict[BannerShape, LayoutSpec] = {
    BannerShape.HORIZONTAL: LayoutSpec(
        canvas=(1200, 200),
        image_slots=((10, 10, 160, 180), (1030, 10, 160, 180)),
        caption_box=(350, 0, 550, 200),
        default_style=BackgroundStyle.WAVE1,
    ),
    BannerShape.VERTICAL: LayoutSpec(
        canvas=(345, 300),
        image_slots=((10, 10, 110, 130), (225, 10, 110, 130)),
        caption_box=(10, 150, 325, 140),
        default_style=BackgroundStyle.STRIPES,
    ),
    BannerShape.BLOCK: LayoutSpec(
        canvas=(300, 300),
        image_slots=((10, 0, 280, 320),),
        caption_box=(10, 200, 280, 90),
        default_style=BackgroundStyle.BLOCK,
    ),
}


def layout_for(shape: Union[str, BannerShape]) -> LayoutSpec:
    return LAYOUTS[BannerShape(shape)]


# ── Resampling ────────────────────────────────────────────────────────────────

def load_and_resize(path: Union[str, Path], width: int, height: int) -> Image.Image:
    """
    Decode path with the codec its extension names and resample to width × height.

    Aspect ratio is not preserved: the result is always exactly the target size.

    Raises:
        DecodeError: missing, unreadable or wrong-codec file.
        ValueError:  non-positive target size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"target size must be positive, got {width}x{height}")

    source = load_source_image(path, by_extension=True)
    try:
        return source.resize((width, height), Image.LANCZOS)
    finally:
        source.close()


def place_on_background(background: Image.Image, foreground: Image.Image, rect: Rect) -> Image.Image:
    """Paste a resampled copy of foreground into rect on background (in place)."""
    x, y, w, h = rect
    if w <= 0 or h <= 0:
        raise ValueError(f"placement rectangle must have a positive size, got {rect}")

    tile = foreground.convert("RGB")
    if tile.size != (w, h):
        tile = tile.resize((w, h), Image.LANCZOS)
    background.paste(tile, (x, y))
    logger.debug("Placed %dx%d image at (%d, %d)", w, h, x, y)
    return background
