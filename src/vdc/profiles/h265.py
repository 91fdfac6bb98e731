"""H.265 profile (libx265 in an MP4 container, tagged for Apple players)."""

from __future__ import annotations

from vdc.domain.enums import ProfileVariant
from vdc.domain.models import StreamMetadata
from vdc.filters import join_filters
from vdc.options import VideoOptions
from vdc.profiles.base import EncodeSpec, Profile
from vdc.profiles.h264 import AAC_AUDIO_OPTIONS


class H265Profile(Profile):
    """HEVC with VBV limits passed through x265-params."""

    variant = ProfileVariant.H265

    def __init__(self) -> None:
        super().__init__("h265", "mp4")

    def build(
        self,
        filters: list[str],
        options: VideoOptions,
        metadata: StreamMetadata,
    ) -> EncodeSpec:
        fps = self.target_fps(options, metadata)
        crf = getattr(options, "crf", None)
        preset = getattr(options, "preset", None)
        max_rate = getattr(options, "max_rate", None)
        buf_size = getattr(options, "buf_size", None)

        output_options: list[str] = []
        if crf is not None:
            output_options.extend(["-crf", str(crf)])
        if preset:
            output_options.extend(["-preset", preset])
        if crf is None and max_rate and buf_size:
            output_options.extend(
                ["-x265-params", f"vbv-maxrate={max_rate}:vbv-bufsize={buf_size}"]
            )
        output_options.extend(
            [
                "-bf", "2",
                "-g", str(max(1, fps // 2)),
                "-pix_fmt", "yuv420p",
                "-tag:v", "hvc1",
            ]
        )  # fmt: skip
        return EncodeSpec(
            video_codec="libx265",
            filter_graph=join_filters(filters) or None,
            output_options=tuple(output_options),
            audio_codec="aac",
            audio_options=AAC_AUDIO_OPTIONS,
            container_flags=("-movflags", "+faststart"),
        )
