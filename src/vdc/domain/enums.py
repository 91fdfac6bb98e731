"""Domain enums for the Video Delivery Converter."""

from enum import Enum


class ProfileVariant(Enum):
    """Output codec profile families.

    The built-in variants are a closed set; CUSTOM covers every profile
    registered from configuration.
    """

    H264 = "h264"
    H265 = "h265"
    VP9 = "vp9"
    WEBP = "webp"
    GIF = "gif"
    CUSTOM = "custom"


class ArtifactKind(Enum):
    """Kind of cached artifact, used as the subdirectory inside a tier."""

    VIDEOS = "videos"  # single file per key
    SCREENSHOTS = "screenshots"  # directory of frames per key


class CacheTier(Enum):
    """On-disk cache generations."""

    ACTIVE = "active"  # current build
    ROLLING = "rolling"  # previous build, kept one cycle for backfill


class CacheState(Enum):
    """Where an artifact currently lives."""

    ABSENT = "absent"
    IN_ROLLING_ONLY = "in_rolling_only"
    IN_ACTIVE = "in_active"


class RestoreOutcome(Enum):
    """Result of looking an artifact up in the tiered cache."""

    ACTIVE_HIT = "active_hit"
    PROMOTED = "promoted"  # moved from rolling into active
    MISS = "miss"

    @property
    def hit(self) -> bool:
        """True when the artifact is now present in the active tier."""
        return self is not RestoreOutcome.MISS


class AssetOrigin(Enum):
    """Where a source asset comes from."""

    LOCAL = "local"
    REMOTE = "remote"
