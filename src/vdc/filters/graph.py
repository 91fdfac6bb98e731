"""Translate conversion options into ffmpeg filter stages.

Stages are appended in a fixed order because filter order changes the
output: time remap, frame rate, scale, saturation, overlay.
"""

from __future__ import annotations

import logging
import math

from vdc.domain.models import StreamMetadata
from vdc.options import VideoOptions

logger = logging.getLogger(__name__)

# Resampling filter used for every scale stage
SCALE_FLAGS = "lanczos"


def floor_even(value: float) -> int:
    """Round a dimension down to the nearest even number (minimum 2).

    Most encoders need even dimensions for 4:2:0 chroma subsampling.
    """
    return max(2, int(math.floor(value)) // 2 * 2)


def format_number(value: float) -> str:
    """Shortest text that round-trips the value, without a trailing ".0"."""
    text = repr(float(value))
    return text.removesuffix(".0")


def build_time_remap_filter(
    requested_duration: float | None,
    source_duration: float | None,
) -> str | None:
    """Build the setpts stage that squeezes the source into a duration.

    Args:
        requested_duration: Desired output duration in seconds.
        source_duration: Probed source duration in seconds.

    Returns:
        Filter expression, or None unless both durations are known.
    """
    if not requested_duration or not source_duration:
        return None
    multiplier = requested_duration / source_duration
    return f"setpts={multiplier:.6f}*PTS"


def build_scale_filter(
    max_width: int | None,
    max_height: int | None,
    source_width: int | None = None,
    source_height: int | None = None,
) -> str | None:
    """Build a scale stage that fits the video inside the given bounds.

    Never upscales and preserves the aspect ratio. With known source
    dimensions the target size is computed here, both sides floored to
    even numbers. This applies even when no bound is exceeded, so a
    641x361 source becomes 640x360 rather than failing in the encoder.
    Without them an equivalent ffmpeg expression is emitted.

    Args:
        max_width: Maximum output width.
        max_height: Maximum output height.
        source_width: Probed source width.
        source_height: Probed source height.

    Returns:
        Filter expression, or None when no bound is given.
    """
    if not max_width and not max_height:
        return None

    if source_width and source_height:
        ratios = [1.0]
        if max_width:
            ratios.append(max_width / source_width)
        if max_height:
            ratios.append(max_height / source_height)
        factor = min(ratios)
        width = floor_even(source_width * factor)
        height = floor_even(source_height * factor)
        return f"scale={width}:{height}:flags={SCALE_FLAGS}"

    if max_width and not max_height:
        return f"scale='min({max_width},iw)':-2:flags={SCALE_FLAGS}"
    if max_height and not max_width:
        return f"scale=-2:'min({max_height},ih)':flags={SCALE_FLAGS}"
    return (
        f"scale='trunc(iw*min(1\\,min({max_width}/iw\\,{max_height}/ih))/2)*2'"
        f":-2:flags={SCALE_FLAGS}"
    )


def _overlay_position(anchor: str, axis: str, padding: int) -> str:
    """Resolve an anchor on one axis to an overlay coordinate expression."""
    main, over = ("main_w", "overlay_w") if axis == "x" else ("main_h", "overlay_h")
    if anchor == "start":
        return str(padding)
    if anchor == "end":
        return f"{main}-{over}-{padding}"
    return f"({main}-{over})/2"


def build_overlay_filter(x: str, y: str, padding: int) -> str:
    """Build the overlay stage for a secondary image input.

    Args:
        x: Horizontal anchor (start, center or end).
        y: Vertical anchor (start, center or end).
        padding: Pixel padding, applied to start/end anchors only.

    Returns:
        Filter expression.
    """
    pos_x = _overlay_position(x, "x", padding)
    pos_y = _overlay_position(y, "y", padding)
    return f"overlay=x={pos_x}:y={pos_y}"


def build_filters(options: VideoOptions, metadata: StreamMetadata) -> list[str]:
    """Build the ordered filter stages for a conversion.

    Args:
        options: Resolved conversion options.
        metadata: Probed source metadata.

    Returns:
        Filter stage expressions in application order.
    """
    filters: list[str] = []

    if options.duration:
        remap = build_time_remap_filter(options.duration, metadata.source_duration)
        if remap:
            filters.append(remap)
        else:
            logger.debug(
                "Source duration unknown, skipping time remap",
                extra={"requested_duration": options.duration},
            )

    if options.fps:
        filters.append(f"fps={options.fps}")

    scale = build_scale_filter(
        options.max_width,
        options.max_height,
        metadata.width,
        metadata.height,
    )
    if scale:
        filters.append(scale)

    if options.saturation != 1:
        filters.append(f"eq=saturation={format_number(options.saturation)}")

    if options.overlay:
        filters.append(
            build_overlay_filter(
                options.overlay_x, options.overlay_y, options.overlay_padding
            )
        )

    return filters


def join_filters(filters: list[str]) -> str:
    """Join filter stages into a single linear filter chain."""
    return ",".join(filters)
