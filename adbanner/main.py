"""
adbanner - promotional banner generator

Usage:
  python -m adbanner.main banner horizontal left.jpg right.jpg --text "Fresh drops" --style radial
  python -m adbanner.main banner block product.png --output block.jpg --format jpeg
  python -m adbanner.main palette product.jpg --max-colors 8
  python -m adbanner.main styles
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .backgrounds import BackgroundStyle
from .color_selector import most_different_color, most_used_color, select_primary
from .colors import to_hex
from .compositor import LAYOUTS, BannerShape
from .config import Settings, load_settings
from .errors import BannerError
from .palette import extract_palette, load_source_image
from .pipeline import BannerPipeline, BannerRequest
from .storage import LocalDiskStore, save_banner

console = Console()


# ── CLI ───────────────────────────────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="adbanner",
        description="Promotional banner generator: palette-matched backgrounds for product photos",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    banner = sub.add_parser("banner", help="Render a banner from one or two photos")
    banner.add_argument("shape", choices=[s.value for s in BannerShape])
    banner.add_argument("images", nargs="+", type=Path, help="Source photo(s); the first drives the colours")
    banner.add_argument("--text", default=None, help="Caption text")
    banner.add_argument("--subtitle", default=None, help="Smaller second caption block")
    banner.add_argument("--style", default=None, help="Background style (see `styles`); defaults per shape")
    banner.add_argument("--width", type=int, default=None, help="Resize width for the photos")
    banner.add_argument("--height", type=int, default=None, help="Resize height for the photos")
    banner.add_argument("--banner-width", type=int, default=None, help="Canvas width override")
    banner.add_argument("--banner-height", type=int, default=None, help="Canvas height override")
    banner.add_argument("--font", type=Path, default=None, help="Caption font file")
    banner.add_argument("--output", default=None, help="Output file (relative to the output dir)")
    banner.add_argument("--format", choices=["png", "jpeg"], default=None, help="Encoder; defaults from extension")
    banner.add_argument("--seed", type=int, default=None, help="Seed for randomised styles")

    palette = sub.add_parser("palette", help="Show the palette and selected colours of a photo")
    palette.add_argument("image", type=Path)
    palette.add_argument("--max-colors", type=int, default=None)

    sub.add_parser("styles", help="List background styles")
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


# ── Commands ──────────────────────────────────────────────────────────────────

def run_banner(args: argparse.Namespace, settings: Settings) -> Path:
    shape = BannerShape(args.shape)
    request = BannerRequest(
        image_paths=args.images,
        text=args.text,
        subtitle=args.subtitle,
        width=args.width,
        height=args.height,
        banner_width=args.banner_width,
        banner_height=args.banner_height,
        font_path=args.font,
        style=args.style,
        shape=shape,
        seed=args.seed,
    )

    banner = BannerPipeline(settings).build(request)
    try:
        suffix = ".jpg" if args.format == "jpeg" else ".png"
        output = args.output or f"{args.images[0].stem}_{shape.value}{suffix}"
        store = LocalDiskStore(settings.output_dir)
        path = save_banner(banner, output, store, fmt=args.format, quality=settings.jpeg_quality)
    finally:
        banner.close()

    console.print(f"[green]✓ Banner[/green] → {path}")
    return path


def run_palette(args: argparse.Namespace, settings: Settings) -> None:
    img = load_source_image(args.image)
    try:
        palette = extract_palette(img, args.max_colors or settings.max_colors)
        secondary = most_used_color(img, settings.white_threshold, settings.black_threshold)
    finally:
        img.close()
    primary = select_primary(palette)
    contrast = most_different_color(palette, primary)

    table = Table(title=f"Palette · {args.image.name}")
    table.add_column("#", justify="right")
    table.add_column("RGB")
    table.add_column("Hex")
    table.add_column("Role")
    for i, color in enumerate(palette):
        roles = []
        if color == primary:
            roles.append("primary")
        if color == contrast:
            roles.append("contrast")
        table.add_row(str(i), str(color), f"[on {to_hex(color)}]  [/] {to_hex(color)}", ", ".join(roles))
    console.print(table)
    console.print(f"secondary (most used pixel): {secondary} {to_hex(secondary)}")


def run_styles() -> None:
    defaults = {layout.default_style: shape.value for shape, layout in LAYOUTS.items()}
    for style in BackgroundStyle:
        note = f"  [dim](default for {defaults[style]})[/dim]" if style in defaults else ""
        console.print(f"  {style.value}{note}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings()
        configure_logging("DEBUG" if args.verbose else settings.log_level)

        if args.command == "banner":
            run_banner(args, settings)
        elif args.command == "palette":
            run_palette(args, settings)
        else:
            run_styles()
    except ValidationError as e:
        console.print(f"[red]✗ invalid request:[/red] {e}")
        return 2
    except BannerError as e:
        console.print(f"[red]✗ {e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
