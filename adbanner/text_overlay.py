"""
text_overlay.py - Word-wrapped caption text with a drop shadow, drawn inside a box.

Lines are wrapped at whitespace to a character budget first (long words stay
whole), then re-wrapped by pixel width so nothing spills out of the box.
The shadow pass is drawn before the text pass at a small offset.

Usage:
    from adbanner.text_overlay import CaptionStyle, draw_caption

    style = CaptionStyle(box=(350, 0, 550, 200), align="left", valign="center")
    draw_caption(banner, "Summer sale: 40% off all sneakers", "fonts/Inter.ttf", style)
"""

from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .colors import BLACK, RGBA, WHITE, Color, translucent
from .errors import FontError

logger = logging.getLogger(__name__)

DEFAULT_WRAP_WIDTH = 50

# ── Font helpers ──────────────────────────────────────────────────────────────

FONT_CANDIDATES = [
    "/System/Library/Fonts/HelveticaNeue.ttc",
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "C:/Windows/Fonts/arial.ttf",
]


def resolve_font_path(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Return path if given, otherwise the first installed candidate font.

    Raises:
        FontError: no path given and no candidate exists.
    """
    if path:
        return Path(path)
    for candidate in FONT_CANDIDATES:
        if Path(candidate).is_file():
            return Path(candidate)
    raise FontError(None, "no font configured and no system font found")


def load_font(path: Union[str, Path], size: int) -> ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(str(path), size)
    except OSError as e:
        raise FontError(path, str(e)) from e


# ── Wrapping ──────────────────────────────────────────────────────────────────

def wrap_text(text: str, width: int = DEFAULT_WRAP_WIDTH) -> List[str]:
    """
    Split text into lines of at most width characters, breaking only at whitespace.

    A single word longer than width is emitted whole on its own line.
    Existing line breaks are kept.
    """
    lines: List[str] = []
    for paragraph in text.splitlines():
        wrapped = textwrap.wrap(
            paragraph,
            width=max(1, width),
            break_long_words=False,
            break_on_hyphens=False,
        )
        lines.extend(wrapped)
    return lines


def _text_width(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.FreeTypeFont) -> int:
    bb = draw.textbbox((0, 0), text, font=font)
    return bb[2] - bb[0]


def wrap_pixels(
    lines: List[str],
    draw: ImageDraw.ImageDraw,
    font: ImageFont.FreeTypeFont,
    max_px: int,
) -> List[str]:
    """Re-wrap lines so each fits within max_px, still breaking only between words."""
    result: List[str] = []
    for line in lines:
        if _text_width(draw, line, font) <= max_px:
            result.append(line)
            continue
        current = ""
        for word in line.split():
            test = (current + " " + word).strip()
            if _text_width(draw, test, font) <= max_px or not current:
                current = test
            else:
                result.append(current)
                current = word
        if current:
            result.append(current)
    return result


# ── Drawing ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CaptionStyle:
    box: Tuple[int, int, int, int]                  # x, y, w, h
    align: str = "left"                             # left | center | right
    valign: str = "center"                          # top | center | bottom
    font_size: int = 30
    line_height: float = 1.5                        # multiple of font_size
    color: Color = WHITE
    shadow_color: Optional[RGBA] = translucent(BLACK, 50)
    shadow_offset: Tuple[int, int] = (2, 2)
    wrap_width: int = DEFAULT_WRAP_WIDTH


def _line_x(align: str, box_x: int, box_w: int, line_w: int) -> float:
    if align == "center":
        return box_x + (box_w - line_w) / 2
    if align == "right":
        return box_x + box_w - line_w
    return box_x


def _block_y(valign: str, box_y: int, box_h: int, block_h: float) -> float:
    if valign == "center":
        return box_y + (box_h - block_h) / 2
    if valign == "bottom":
        return box_y + box_h - block_h
    return box_y


def draw_caption(
    image: Image.Image,
    text: Optional[str],
    font_path: Union[str, Path],
    style: CaptionStyle,
) -> Image.Image:
    """
    Draw text into style.box on image (in place) and return the image.

    Text and shadow are rendered on a copy of the box region and pasted back,
    so nothing outside the box is touched. Empty or None text leaves the image
    untouched without loading the font.

    Raises:
        FontError: font_path cannot be loaded.
    """
    if not text or not text.strip():
        return image

    font = load_font(font_path, style.font_size)
    box_x, box_y, box_w, box_h = style.box
    if box_w <= 0 or box_h <= 0:
        return image

    region = image.crop((box_x, box_y, box_x + box_w, box_y + box_h))
    draw = ImageDraw.Draw(region, "RGBA")

    lines = wrap_pixels(wrap_text(text, style.wrap_width), draw, font, box_w)
    line_px = style.font_size * style.line_height
    # the last line only needs its glyph height, not the full leading
    block_h = line_px * (len(lines) - 1) + style.font_size
    y = _block_y(style.valign, 0, box_h, block_h)

    dx, dy = style.shadow_offset
    for line in lines:
        x = _line_x(style.align, 0, box_w, _text_width(draw, line, font))
        if style.shadow_color is not None:
            draw.text((x + dx, y + dy), line, font=font, fill=style.shadow_color)
        draw.text((x, y), line, font=font, fill=style.color)
        y += line_px

    image.paste(region, (box_x, box_y))
    logger.debug("Caption drawn: %d line(s) in box %s", len(lines), style.box)
    return image
