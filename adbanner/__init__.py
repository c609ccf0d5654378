"""Promotional banner generator: palette-matched procedural backgrounds for product photos."""

from .backgrounds import BackgroundStyle, render_background
from .colors import ColorPair, color_distance, make_faint
from .compositor import BannerShape, load_and_resize, place_on_background
from .errors import BannerError, DecodeError, DegenerateInputWarning, FontError, StorageError
from .palette import extract_palette
from .pipeline import BannerPipeline, BannerRequest, generate_banner

__all__ = [
    "BackgroundStyle",
    "BannerError",
    "BannerPipeline",
    "BannerRequest",
    "BannerShape",
    "ColorPair",
    "DecodeError",
    "DegenerateInputWarning",
    "FontError",
    "StorageError",
    "color_distance",
    "extract_palette",
    "generate_banner",
    "load_and_resize",
    "make_faint",
    "place_on_background",
    "render_background",
]

__version__ = "0.1.0"
