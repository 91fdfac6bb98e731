"""VP9 profile (libvpx-vp9 in a WebM container).

Bitrates default to Google's VOD recommendations, picked from the bucket
closest to the source's smaller dimension and the target frame rate:
https://developers.google.com/media/vp9/settings/vod/#bitrate
"""

from __future__ import annotations

import logging

from vdc.domain.enums import ProfileVariant
from vdc.domain.models import StreamMetadata
from vdc.filters import join_filters
from vdc.options import VideoOptions
from vdc.profiles.base import EncodeSpec, Profile

logger = logging.getLogger(__name__)

# resolution -> fps -> (target, min, max)
BITRATE_LADDER: dict[int, dict[int, tuple[str, str, str]]] = {
    240: {30: ("150k", "75k", "218k")},
    360: {30: ("276k", "138k", "400k")},
    480: {30: ("750k", "375k", "1088k")},
    720: {
        30: ("1024k", "512k", "1485k"),
        60: ("1800k", "900k", "2610k"),
    },
    1080: {
        30: ("1800k", "900k", "2610k"),
        60: ("3000k", "1500k", "4350k"),
    },
    1440: {
        30: ("6000k", "3000k", "8700k"),
        60: ("9000k", "4500k", "13050k"),
    },
    2160: {
        30: ("12000k", "6000k", "17400k"),
        60: ("18000k", "9000k", "26100k"),
    },
}


def closest(candidates: list[int], target: float) -> int:
    """Pick the candidate with the smallest absolute distance to target.

    Ties resolve to the first candidate in iteration order.
    """
    best = candidates[0]
    for candidate in candidates[1:]:
        if abs(candidate - target) < abs(best - target):
            best = candidate
    return best


def select_bitrates(
    width: int | None,
    height: int | None,
    fps: int,
) -> tuple[int, int, tuple[str, str, str]]:
    """Select the ladder bucket for a source.

    Args:
        width: Source width.
        height: Source height.
        fps: Target frame rate.

    Returns:
        Tuple of (resolution bucket, fps bucket, (target, min, max)).
    """
    dimension_min = min(width or 0, height or 0)
    resolution = closest(list(BITRATE_LADDER), dimension_min)
    fps_bucket = closest(list(BITRATE_LADDER[resolution]), fps)
    return resolution, fps_bucket, BITRATE_LADDER[resolution][fps_bucket]


class VP9Profile(Profile):
    """VP9 with an automatic bitrate ladder and Opus audio."""

    variant = ProfileVariant.VP9

    def __init__(self) -> None:
        super().__init__("vp9", "webm")

    def build(
        self,
        filters: list[str],
        options: VideoOptions,
        metadata: StreamMetadata,
    ) -> EncodeSpec:
        fps = self.target_fps(options, metadata)
        resolution, fps_bucket, (target, minimum, maximum) = select_bitrates(
            metadata.width, metadata.height, fps
        )
        bitrate = getattr(options, "bitrate", None) or target
        min_rate = getattr(options, "min_rate", None) or minimum
        max_rate = getattr(options, "max_rate", None) or maximum
        logger.debug(
            "VP9 ladder bucket %dp/%dfps",
            resolution,
            fps_bucket,
            extra={"bitrate": bitrate, "min_rate": min_rate, "max_rate": max_rate},
        )

        output_options: list[str] = []
        crf = getattr(options, "crf", None)
        if crf is not None:
            output_options.extend(["-crf", str(crf)])
        output_options.extend(
            [
                "-b:v", bitrate,
                "-minrate", min_rate,
                "-maxrate", max_rate,
                "-cpu-used", str(getattr(options, "cpu_used", 1)),
                "-g", str(fps * 8),
                "-pix_fmt", "yuv420p",
            ]
        )  # fmt: skip
        return EncodeSpec(
            video_codec="libvpx-vp9",
            filter_graph=join_filters(filters) or None,
            output_options=tuple(output_options),
            audio_codec="libopus",
        )
