"""Domain models for the Video Delivery Converter.

All models are frozen dataclasses: jobs and results reference each other
only by path or key, never by shared mutable objects.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from vdc.domain.enums import AssetOrigin

if TYPE_CHECKING:
    from vdc.options import ScreenshotOptions, VideoOptions


@dataclass(frozen=True)
class LocalAsset:
    """An unresolved asset stored on the local filesystem."""

    asset_id: str
    path: Path
    media_type: str | None = None
    content_digest: str | None = None
    """Precomputed digest, if the host already knows it."""


@dataclass(frozen=True)
class RemoteAsset:
    """An unresolved asset that must be fetched before conversion."""

    asset_id: str
    remote_id: str
    url: str
    file_name: str
    size: int | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class SourceAsset:
    """A resolved input video.

    Immutable once resolved; re-derived whenever the underlying asset
    changes.
    """

    asset_id: str
    digest: str
    path: Path
    media_type: str
    name: str
    """Base name without extension, used for public file names."""

    origin: AssetOrigin = AssetOrigin.LOCAL


@dataclass(frozen=True)
class SkippedAsset:
    """Typed skip signal for assets that are not videos.

    Returned instead of raising so callers can resolve to an empty result
    without failing the whole pipeline.
    """

    asset_id: str
    media_type: str | None
    reason: str


@dataclass(frozen=True)
class StreamInfo:
    """Probed facts about a single stream."""

    index: int
    codec_type: str
    codec_name: str | None = None
    width: int | None = None
    height: int | None = None
    r_frame_rate: str | None = None
    avg_frame_rate: str | None = None
    duration: float | None = None


def parse_frame_rate(rate: str | None) -> float | None:
    """Evaluate a rational frame rate string such as "30000/1001".

    Args:
        rate: Frame rate from ffprobe.

    Returns:
        Frames per second, or None if missing or invalid.
    """
    if not rate:
        return None
    numerator, _, denominator = rate.partition("/")
    try:
        num = float(numerator)
        den = float(denominator) if denominator else 1.0
    except ValueError:
        return None
    if den == 0 or num <= 0 or math.isnan(num):
        return None
    return num / den


@dataclass(frozen=True)
class StreamMetadata:
    """Probed facts about a source video.

    Obtained once per job from the prober and never mutated.
    """

    streams: tuple[StreamInfo, ...] = ()
    format_name: str | None = None
    format_long_name: str | None = None
    duration: float | None = None
    start_time: float | None = None
    size: int | None = None
    bit_rate: int | None = None

    @property
    def video_stream(self) -> StreamInfo | None:
        """First video stream, if any."""
        for stream in self.streams:
            if stream.codec_type == "video":
                return stream
        return None

    @property
    def width(self) -> int | None:
        stream = self.video_stream
        return stream.width if stream else None

    @property
    def height(self) -> int | None:
        stream = self.video_stream
        return stream.height if stream else None

    @property
    def frame_rate(self) -> float | None:
        """Real frame rate of the video stream."""
        stream = self.video_stream
        if stream is None:
            return None
        return parse_frame_rate(stream.r_frame_rate) or parse_frame_rate(
            stream.avg_frame_rate
        )

    @property
    def current_fps(self) -> int | None:
        """Frame rate rounded to whole frames (at least 1)."""
        rate = self.frame_rate
        if rate is None:
            return None
        return max(1, round(rate))

    @property
    def source_duration(self) -> float | None:
        """Duration of the video stream, falling back to the container."""
        stream = self.video_stream
        if stream is not None and stream.duration:
            return stream.duration
        return self.duration or None


@dataclass(frozen=True)
class CacheKey:
    """Deterministic identifier for a cached artifact.

    The value is always ``<source digest>-<options hash>``: source digest
    first, options hash second.
    """

    source_digest: str
    options_hash: str

    @property
    def value(self) -> str:
        return f"{self.source_digest}-{self.options_hash}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ConversionJob:
    """One video conversion request."""

    source: SourceAsset
    profile_name: str
    options: VideoOptions
    cache_key: CacheKey
    extension: str
    public_path: Path
    """Destination of the published copy."""

    @property
    def artifact_name(self) -> str:
        """File name of the artifact inside a tier's videos directory."""
        return f"{self.cache_key}.{self.extension}"

    @property
    def label(self) -> str:
        """Human-readable task label for logs."""
        return f"{self.source.name} ({self.profile_name})"


@dataclass(frozen=True)
class ScreenshotJob:
    """One screenshot extraction request."""

    source: SourceAsset
    options: ScreenshotOptions
    cache_key: CacheKey

    @property
    def artifact_name(self) -> str:
        """Directory name of the artifact inside a tier's screenshots dir."""
        return str(self.cache_key)

    @property
    def label(self) -> str:
        return f"{self.source.name} (screenshots)"


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a successful conversion."""

    cache_key: CacheKey
    cache_path: Path
    public_path: Path
    from_cache: bool = False


@dataclass(frozen=True)
class ScreenshotResult:
    """Outcome of a successful screenshot extraction."""

    cache_key: CacheKey
    paths: tuple[Path, ...]
    from_cache: bool = False
    records: tuple[Any, ...] = field(default=())
    """Whatever the record sink returned for each frame, if one is set."""


@dataclass(frozen=True)
class VideoDescription:
    """Facts about a published video, as exposed to the host."""

    path: str
    absolute_path: Path
    name: str
    ext: str
    format_name: str | None = None
    format_long_name: str | None = None
    start_time: float | None = None
    duration: float | None = None
    size: int | None = None
    bit_rate: int | None = None
    width: int | None = None
    height: int | None = None
    aspect_ratio: float | None = None
