"""
config.py - Runtime settings read from the environment (and a local .env file).

Supported variables:
    ADBANNER_FONT_PATH        caption font (.ttf / .otf / .ttc)
    ADBANNER_OUTPUT_DIR       where the CLI writes banners      (default: outputs)
    ADBANNER_SEED             seed for the randomised styles    (default: unseeded)
    ADBANNER_LOG_LEVEL        DEBUG / INFO / WARNING / ERROR    (default: INFO)
    ADBANNER_MAX_COLORS       palette size                      (default: 10)
    ADBANNER_WHITE_THRESHOLD  white-family cut-off              (default: 200)
    ADBANNER_BLACK_THRESHOLD  black-family cut-off              (default: 50)
    ADBANNER_JPEG_QUALITY     JPEG encoder quality              (default: 95)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "ADBANNER_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    font_path: Optional[Path] = Field(default=None, description="Caption font file")
    output_dir: Path = Field(default=Path("outputs"), description="CLI output directory")
    seed: Optional[int] = Field(default=None, description="Seed for randomised background styles")
    log_level: str = Field(default="INFO", description="Root log level for the CLI")
    max_colors: int = Field(default=10, ge=1, le=256, description="Palette size")
    white_threshold: int = Field(default=200, ge=0, le=255)
    black_threshold: int = Field(default=50, ge=0, le=255)
    jpeg_quality: int = Field(default=95, ge=1, le=100)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.strip().upper() or "INFO"
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> Settings:
    """
    Build Settings from ADBANNER_* variables.

    Args:
        environ: Mapping to read instead of os.environ (tests).
        dotenv:  Load a .env file into os.environ first.
    """
    if dotenv and environ is None:
        load_dotenv()
    source = os.environ if environ is None else environ

    values = {}
    for name in Settings.model_fields:
        raw = source.get(ENV_PREFIX + name.upper())
        if raw is not None and raw.strip() != "":
            values[name] = raw.strip()
    return Settings(**values)
