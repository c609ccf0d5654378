"""Synthetic photos and font lookup shared by the test modules."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageDraw

from adbanner.errors import FontError
from adbanner.text_overlay import resolve_font_path

RED = (200, 40, 40)
BLUE = (40, 120, 200)


def make_photo(
    path: Path,
    size: Tuple[int, int] = (120, 80),
    main: Tuple[int, int, int] = RED,
    accent: Tuple[int, int, int] = BLUE,
    fmt: Optional[str] = None,
) -> Path:
    """Left half main colour, right quarter accent colour, remainder white."""
    w, h = size
    img = Image.new("RGB", size, (255, 255, 255))
    draw = ImageDraw.Draw(img)
    draw.rectangle([0, 0, w // 2 - 1, h - 1], fill=main)
    draw.rectangle([w * 3 // 4, 0, w - 1, h - 1], fill=accent)
    img.save(path, format=fmt)
    return path


def system_font() -> Optional[Path]:
    try:
        return resolve_font_path()
    except FontError:
        return None
