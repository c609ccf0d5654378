"""
palette.py - Decode source photos and reduce them to a small representative palette.

Quantization is median-cut over the RGB cube (Pillow's MEDIANCUT quantizer).
Palette entries are ordered by cluster size, largest first; equal-sized
clusters keep the quantizer's own order.

Usage:
    from adbanner.palette import load_source_image, extract_palette

    img     = load_source_image("photos/shoe.jpg")
    palette = extract_palette(img, max_colors=10)
    # → [(212, 48, 61), (240, 238, 236), ...]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

from PIL import Image, UnidentifiedImageError

from .colors import Color
from .errors import DecodeError

logger = logging.getLogger(__name__)

DEFAULT_MAX_COLORS = 10
SAMPLE_SIZE = 400   # longest side fed to the quantizer

# Extension → Pillow codec. Anything unknown is treated as JPEG.
_CODECS = {
    ".png":  "PNG",
    ".webp": "WEBP",
}


def codec_for_path(path: Union[str, Path]) -> str:
    return _CODECS.get(Path(path).suffix.lower(), "JPEG")


def load_source_image(path: Union[str, Path], by_extension: bool = False) -> Image.Image:
    """
    Decode an image file into a fully loaded RGB image.

    Args:
        path:         File to read.
        by_extension: Only accept the codec implied by the file extension
                      (png, webp, else jpeg) instead of sniffing the content.

    Raises:
        DecodeError: file missing, unreadable, or not decodable.
    """
    path = Path(path)
    formats = [codec_for_path(path)] if by_extension else None
    try:
        with Image.open(path, formats=formats) as img:
            img.load()
            rgb = img.convert("RGB")
    except FileNotFoundError as e:
        raise DecodeError(path, "open", "file not found") from e
    except UnidentifiedImageError as e:
        raise DecodeError(path, "decode", "unsupported or corrupt image") from e
    except (OSError, ValueError) as e:
        raise DecodeError(path, "decode", str(e)) from e

    logger.debug("Decoded %s (%dx%d)", path, rgb.width, rgb.height)
    return rgb


def extract_palette(image: Image.Image, max_colors: int = DEFAULT_MAX_COLORS) -> List[Color]:
    """
    Median-cut the image down to at most max_colors representative colours.

    Args:
        image:      Any non-empty Pillow image.
        max_colors: Upper bound on palette length (at least 1).

    Returns:
        Palette ordered by cluster pixel count, largest first.
    """
    max_colors = max(1, min(256, int(max_colors)))

    sample = image.convert("RGB")
    if max(sample.size) > SAMPLE_SIZE:
        sample = sample.copy()
        sample.thumbnail((SAMPLE_SIZE, SAMPLE_SIZE), Image.BILINEAR)

    quantized = sample.quantize(colors=max_colors, method=Image.Quantize.MEDIANCUT)
    flat = quantized.getpalette() or []
    counts = quantized.getcolors(maxcolors=256) or []

    ranked = sorted(counts, key=lambda entry: (-entry[0], entry[1]))
    palette: List[Color] = []
    for _count, index in ranked[:max_colors]:
        r, g, b = flat[index * 3: index * 3 + 3]
        palette.append((r, g, b))

    if not palette:
        # getcolors() only returns None past maxcolors; keep a colour regardless
        palette.append(sample.getpixel((0, 0))[:3])

    return palette


def palette_from_path(path: Union[str, Path], max_colors: int = DEFAULT_MAX_COLORS) -> List[Color]:
    """Decode path and return its palette."""
    img = load_source_image(path)
    try:
        return extract_palette(img, max_colors)
    finally:
        img.close()
