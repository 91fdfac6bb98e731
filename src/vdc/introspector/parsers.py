"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into StreamMetadata.
All functions are pure (no I/O, no side effects) for easy testing.
"""

from __future__ import annotations

import logging
from typing import Any

from vdc.domain.models import StreamInfo, StreamMetadata

logger = logging.getLogger(__name__)


def parse_float(value: Any) -> float | None:
    """Parse a numeric ffprobe field (often a string) into a float.

    Returns:
        The value, or None if missing, invalid or negative.
    """
    if value is None or value == "N/A":
        return None
    try:
        result = float(value)
    except (ValueError, TypeError):
        return None
    if result < 0:
        return None
    return result


def parse_int(value: Any) -> int | None:
    """Parse an integer ffprobe field (often a string)."""
    result = parse_float(value)
    return int(result) if result is not None else None


def parse_stream(stream: dict[str, Any]) -> StreamInfo:
    """Parse a single ffprobe stream dict into a StreamInfo."""
    return StreamInfo(
        index=stream.get("index", 0),
        codec_type=stream.get("codec_type", "unknown"),
        codec_name=stream.get("codec_name"),
        width=parse_int(stream.get("width")) or None,
        height=parse_int(stream.get("height")) or None,
        r_frame_rate=stream.get("r_frame_rate"),
        avg_frame_rate=stream.get("avg_frame_rate"),
        duration=parse_float(stream.get("duration")),
    )


def parse_ffprobe_output(data: dict[str, Any], source: str | None = None) -> StreamMetadata:
    """Parse ffprobe JSON output into StreamMetadata.

    Args:
        data: Parsed ffprobe JSON (``-show_streams -show_format``).
        source: File path, for log context only.

    Returns:
        StreamMetadata with streams in ffprobe order.
    """
    format_info = data.get("format", {})
    streams: list[StreamInfo] = []
    seen_indices: set[int] = set()

    for stream in data.get("streams", []):
        info = parse_stream(stream)
        if info.index in seen_indices:
            logger.warning(
                "Duplicate stream index %d, skipping",
                info.index,
                extra={"source": source},
            )
            continue
        seen_indices.add(info.index)
        streams.append(info)

    return StreamMetadata(
        streams=tuple(streams),
        format_name=format_info.get("format_name"),
        format_long_name=format_info.get("format_long_name"),
        duration=parse_float(format_info.get("duration")),
        start_time=parse_float(format_info.get("start_time")),
        size=parse_int(format_info.get("size")),
        bit_rate=parse_int(format_info.get("bit_rate")),
    )
