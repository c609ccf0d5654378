"""
pipeline.py - Banner Pipeline: source photo(s) → colours → background → layout → caption.

Steps run strictly in order, once, with no retries:

  1. resolve the resize target (request width/height, else the first image's native size)
  2. derive the ColorPair from the first image
  3. render the background style (shape default when none is requested)
  4. resize each source image and place it in the shape's slots
  5. draw the caption, when there is one
  6. return the finished RGB image

An unreadable source raises DecodeError, an unloadable font raises FontError;
either way no partial banner is returned and every decoded image is closed.

Usage:
    from adbanner.pipeline import generate_banner

    banner = generate_banner(
        ["shoe_left.jpg", "shoe_right.jpg"],
        text="Fresh drops every Friday",
        font_path="fonts/Inter-Bold.ttf",
        shape="horizontal",
        style="radial",
        seed=42,
    )
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .backgrounds import BackgroundStyle, render_background
from .color_selector import average_color, select_color_pair
from .colors import WHITE, Color, ColorPair, brightness
from .compositor import BannerShape, LayoutSpec, layout_for, load_and_resize, place_on_background
from .config import Settings
from .palette import load_source_image
from .text_overlay import CaptionStyle, draw_caption, resolve_font_path

logger = logging.getLogger(__name__)


class BannerRequest(BaseModel):
    """Everything one banner needs. Read-only once built."""
    model_config = ConfigDict(frozen=True)

    image_paths: List[Path] = Field(min_length=1, max_length=2, description="Source photos, first one drives the colours")
    text: Optional[str] = Field(default=None, description="Caption / title")
    subtitle: Optional[str] = Field(default=None, description="Second, smaller caption line block")
    width: Optional[int] = Field(default=None, gt=0, description="Resize width for the source photos")
    height: Optional[int] = Field(default=None, gt=0, description="Resize height for the source photos")
    banner_width: Optional[int] = Field(default=None, gt=0, description="Canvas width override")
    banner_height: Optional[int] = Field(default=None, gt=0, description="Canvas height override")
    font_path: Optional[Path] = None
    style: Optional[str] = Field(default=None, description="Background style name; unknown names fall back to wave")
    shape: BannerShape = BannerShape.HORIZONTAL
    seed: Optional[int] = None

    @model_validator(mode="after")
    def _fits_layout(self) -> "BannerRequest":
        slots = len(layout_for(self.shape).image_slots)
        if len(self.image_paths) > slots:
            raise ValueError(f"{self.shape.value} banners take at most {slots} image(s)")
        if self.subtitle and not (self.text and self.text.strip()):
            raise ValueError("a subtitle needs a caption text")
        return self


# ── Caption planning ──────────────────────────────────────────────────────────

def _split_box(box: Tuple[int, int, int, int], ratio: float = 0.6) -> Tuple[Tuple[int, int, int, int], Tuple[int, int, int, int]]:
    x, y, w, h = box
    top_h = int(h * ratio)
    return (x, y, w, top_h), (x, y + top_h, w, h - top_h)


def _title_sizes(title_box: Tuple[int, int, int, int]) -> Tuple[int, int]:
    title_size = max(12, min(48, title_box[3] * 2 // 5))
    return title_size, max(10, title_size // 2)


def _caption_plan(
    request: BannerRequest,
    style: BackgroundStyle,
    layout: LayoutSpec,
    canvas: Tuple[int, int],
    colors: ColorPair,
    tint: Optional[Color],
) -> List[Tuple[str, CaptionStyle]]:
    """Which text goes where, in which colours, for the chosen style."""
    width, height = canvas

    if style is BackgroundStyle.MARKETING:
        box = (int(width * 0.35), int(height * 0.2), int(width * 0.45), int(height * 0.5))
        return [(request.text, CaptionStyle(
            box=box, align="center", valign="center", font_size=24,
            color=tint or colors.primary, shadow_color=None,
        ))]

    if style is BackgroundStyle.MEDICAL:
        dark = (brightness(colors.primary) + brightness(colors.secondary)) / 6 < 128
        title_color = WHITE if dark else (0, 0, 0)
        subtitle_color = (200, 200, 200) if dark else (80, 80, 80)
        if not request.subtitle:
            return [(request.text, CaptionStyle(box=layout.caption_box, color=title_color, shadow_color=None))]

        title_box, subtitle_box = _split_box(layout.caption_box)
        title_size, subtitle_size = _title_sizes(title_box)
        return [
            (request.text, CaptionStyle(box=title_box, valign="bottom", font_size=title_size,
                                        color=title_color, shadow_color=None)),
            (request.subtitle, CaptionStyle(box=subtitle_box, valign="top", font_size=subtitle_size,
                                            color=subtitle_color, shadow_color=None)),
        ]

    if not request.subtitle:
        return [(request.text, CaptionStyle(box=layout.caption_box))]

    title_box, subtitle_box = _split_box(layout.caption_box)
    title_size, subtitle_size = _title_sizes(title_box)
    return [
        (request.text, CaptionStyle(box=title_box, valign="bottom", font_size=title_size)),
        (request.subtitle, CaptionStyle(box=subtitle_box, valign="top", font_size=subtitle_size,
                                        color=(230, 230, 230))),
    ]


# ── Pipeline ──────────────────────────────────────────────────────────────────

class BannerPipeline:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()

    def build(self, request: BannerRequest, rng: Optional[random.Random] = None) -> Image.Image:
        layout = layout_for(request.shape)
        style = BackgroundStyle.parse(request.style) if request.style else layout.default_style
        if rng is None:
            seed = request.seed if request.seed is not None else self.settings.seed
            rng = random.Random(seed)

        first = request.image_paths[0]
        source = load_source_image(first)
        try:
            target = (request.width or source.width, request.height or source.height)
            colors = select_color_pair(
                source,
                max_colors=self.settings.max_colors,
                white_threshold=self.settings.white_threshold,
                black_threshold=self.settings.black_threshold,
            )
            tint = None
            if style is BackgroundStyle.MARKETING:
                tint = average_color(source, (0, 0, max(1, source.width // 3), source.height))
        finally:
            source.close()

        canvas = (
            request.banner_width or layout.canvas[0],
            request.banner_height or layout.canvas[1],
        )
        logger.debug(
            "Building %s banner %dx%d style=%s images=%d",
            request.shape.value, canvas[0], canvas[1], style.value, len(request.image_paths),
        )

        banner = render_background(style, colors, canvas[0], canvas[1], rng)
        try:
            for i, slot in enumerate(layout.image_slots):
                path = request.image_paths[min(i, len(request.image_paths) - 1)]
                tile = load_and_resize(path, *target)
                try:
                    place_on_background(banner, tile, slot)
                finally:
                    tile.close()

            if request.text and request.text.strip():
                font_path = resolve_font_path(request.font_path or self.settings.font_path)
                for text, caption in _caption_plan(request, style, layout, canvas, colors, tint):
                    draw_caption(banner, text, font_path, caption)
        except BaseException:
            banner.close()
            raise

        logger.info("Built %s banner from %s (%s)", request.shape.value, first.name, style.value)
        return banner


def generate_banner(
    image_paths,
    text: Optional[str] = None,
    font_path=None,
    shape="horizontal",
    style: Optional[str] = None,
    settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
    **options,
) -> Image.Image:
    """
    Convenience wrapper: build a BannerRequest from arguments and run the pipeline.

    Args:
        image_paths: One path or a list of one/two paths.
        text:        Optional caption.
        font_path:   Caption font; falls back to settings / system fonts.
        shape:       "horizontal", "vertical" or "block".
        style:       Background style name (shape default when None).
        settings:    Pipeline settings (defaults when None).
        rng:         Random source for stochastic styles.
        **options:   Remaining BannerRequest fields (width, height, subtitle,
                     banner_width, banner_height, seed).
    """
    if isinstance(image_paths, (str, Path)):
        image_paths = [image_paths]
    request = BannerRequest(
        image_paths=list(image_paths),
        text=text,
        font_path=font_path,
        shape=shape,
        style=style,
        **options,
    )
    return BannerPipeline(settings).build(request, rng)
