"""Conversion option models.

Option sets are frozen Pydantic models: pure values whose identity is
their content. Each profile family has its own model with codec-specific
knobs and defaults; custom profiles accept arbitrary extra fields.
"""

from vdc.options.models import (
    OPTION_MODELS,
    CustomOptions,
    H264Options,
    H265Options,
    ScreenshotOptions,
    VideoOptions,
    VP9Options,
    build_options,
    build_screenshot_options,
)

__all__ = [
    "OPTION_MODELS",
    "CustomOptions",
    "H264Options",
    "H265Options",
    "ScreenshotOptions",
    "VP9Options",
    "VideoOptions",
    "build_options",
    "build_screenshot_options",
]
