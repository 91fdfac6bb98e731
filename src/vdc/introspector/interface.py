"""Prober interface for stream metadata extraction."""

from pathlib import Path
from typing import Protocol

from vdc.domain.models import StreamMetadata
from vdc.exceptions import VDCError


class MediaIntrospectionError(VDCError):
    """Raised when media introspection fails."""

    pass


class Prober(Protocol):
    """Protocol for stream metadata probes.

    Implementations must report per-stream codec type, frame rate as a
    rational string, duration and dimensions.
    """

    def probe(self, path: Path) -> StreamMetadata:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            StreamMetadata for the file.

        Raises:
            MediaIntrospectionError: If the file cannot be probed.
        """
        ...


def require_video_stream(metadata: StreamMetadata, path: Path) -> StreamMetadata:
    """Check that the probe found a video stream with a usable frame rate.

    Raises:
        MediaIntrospectionError: If there is no video stream or its frame
            rate cannot be parsed.
    """
    if metadata.video_stream is None:
        raise MediaIntrospectionError(
            f"Could not parse video: no video stream in {path}"
        )
    if metadata.frame_rate is None:
        raise MediaIntrospectionError(
            f"Could not parse video: unknown frame rate in {path}"
        )
    return metadata
