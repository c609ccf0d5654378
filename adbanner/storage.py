"""
storage.py - Encode finished banners and hand the bytes to a persistence sink.

PNG is written with maximum zlib compression; JPEG at a fixed high quality.
A sink is anything with put(path, data); LocalDiskStore is the disk-backed one.

Usage:
    from adbanner.storage import LocalDiskStore, save_banner

    store = LocalDiskStore("outputs")
    save_banner(banner, "summer/horizontal.png", store)
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from PIL import Image

from .errors import StorageError

logger = logging.getLogger(__name__)

JPEG_QUALITY = 95

_FORMATS = {
    ".png":  "PNG",
    ".jpg":  "JPEG",
    ".jpeg": "JPEG",
}


class BannerStore(Protocol):
    def put(self, path: Union[str, Path], data: bytes) -> Path:
        ...


class LocalDiskStore:
    """Writes under a root directory, creating parent folders as needed."""

    def __init__(self, root: Union[str, Path] = ".") -> None:
        self.root = Path(root)

    def put(self, path: Union[str, Path], data: bytes) -> Path:
        target = self.root / path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(target, str(e)) from e
        return target


def format_for_path(path: Union[str, Path]) -> str:
    return _FORMATS.get(Path(path).suffix.lower(), "PNG")


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG", compress_level=9, optimize=True)
    return buf.getvalue()


def encode_jpeg(image: Image.Image, quality: int = JPEG_QUALITY) -> bytes:
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def encode(image: Image.Image, fmt: str = "PNG", quality: int = JPEG_QUALITY) -> bytes:
    fmt = fmt.upper()
    if fmt in ("JPG", "JPEG"):
        return encode_jpeg(image, quality)
    if fmt == "PNG":
        return encode_png(image)
    raise ValueError(f"unsupported output format: {fmt}")


def save_banner(
    image: Image.Image,
    path: Union[str, Path],
    store: BannerStore,
    fmt: Optional[str] = None,
    quality: int = JPEG_QUALITY,
) -> Path:
    """
    Encode image (format from fmt, else the path's extension) and store it once.

    Raises:
        StorageError: the sink could not write.
    """
    data = encode(image, fmt or format_for_path(path), quality)
    stored = store.put(path, data)
    logger.info("Saved banner → %s (%d bytes)", stored, len(data))
    return stored
