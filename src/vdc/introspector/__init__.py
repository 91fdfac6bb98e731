"""Media introspection: stream metadata via ffprobe."""

from vdc.introspector.ffprobe import FFprobeProber
from vdc.introspector.interface import (
    MediaIntrospectionError,
    Prober,
    require_video_stream,
)
from vdc.introspector.parsers import parse_ffprobe_output

__all__ = [
    "FFprobeProber",
    "MediaIntrospectionError",
    "Prober",
    "parse_ffprobe_output",
    "require_video_stream",
]
