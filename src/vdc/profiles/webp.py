"""Animated WebP profile."""

from __future__ import annotations

from vdc.domain.enums import ProfileVariant
from vdc.domain.models import StreamMetadata
from vdc.filters import join_filters
from vdc.options import VideoOptions
from vdc.profiles.base import EncodeSpec, Profile


class WebPProfile(Profile):
    variant = ProfileVariant.WEBP

    def __init__(self) -> None:
        super().__init__("webp", "webp")

    def build(
        self,
        filters: list[str],
        options: VideoOptions,
        metadata: StreamMetadata,
    ) -> EncodeSpec:
        return EncodeSpec(
            video_codec="libwebp",
            filter_graph=join_filters(filters) or None,
            output_options=(
                "-preset", "picture",
                "-compression_level", "6",
                "-loop", "0",
            ),  # fmt: skip
        )
