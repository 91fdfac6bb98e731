"""Domain types shared across the conversion pipeline."""

from vdc.domain.enums import (
    ArtifactKind,
    AssetOrigin,
    CacheState,
    CacheTier,
    ProfileVariant,
    RestoreOutcome,
)
from vdc.domain.models import (
    CacheKey,
    ConversionJob,
    ConversionResult,
    LocalAsset,
    RemoteAsset,
    ScreenshotJob,
    ScreenshotResult,
    SkippedAsset,
    SourceAsset,
    StreamInfo,
    StreamMetadata,
    VideoDescription,
)

__all__ = [
    "ArtifactKind",
    "AssetOrigin",
    "CacheKey",
    "CacheState",
    "CacheTier",
    "ConversionJob",
    "ConversionResult",
    "LocalAsset",
    "ProfileVariant",
    "RemoteAsset",
    "RestoreOutcome",
    "ScreenshotJob",
    "ScreenshotResult",
    "SkippedAsset",
    "SourceAsset",
    "StreamInfo",
    "StreamMetadata",
    "VideoDescription",
]
