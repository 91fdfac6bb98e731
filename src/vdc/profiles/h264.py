"""H.264 profile (libx264 in an MP4 container)."""

from __future__ import annotations

from vdc.domain.enums import ProfileVariant
from vdc.domain.models import StreamMetadata
from vdc.filters import join_filters
from vdc.options import VideoOptions
from vdc.profiles.base import EncodeSpec, Profile

# Stereo AAC: some players reject multichannel AAC in MP4
AAC_AUDIO_OPTIONS = ("-q:a", "5", "-ac", "2")


def rate_control_args(
    crf: int | None,
    preset: str | None,
    max_rate: str | None,
    buf_size: str | None,
) -> list[str]:
    """Build CRF or constrained-rate arguments for x264.

    CRF wins when both are given; the rate/buffer pair is then dropped.
    """
    args: list[str] = []
    if crf is not None:
        args.extend(["-crf", str(crf)])
    if preset:
        args.extend(["-preset", preset])
    if crf is None:
        if max_rate:
            args.extend(["-maxrate", max_rate])
        if buf_size:
            args.extend(["-bufsize", buf_size])
    return args


class H264Profile(Profile):
    """Progressive-playback friendly H.264."""

    variant = ProfileVariant.H264

    def __init__(self) -> None:
        super().__init__("h264", "mp4")

    def build(
        self,
        filters: list[str],
        options: VideoOptions,
        metadata: StreamMetadata,
    ) -> EncodeSpec:
        fps = self.target_fps(options, metadata)
        output_options = rate_control_args(
            getattr(options, "crf", None),
            getattr(options, "preset", None),
            getattr(options, "max_rate", None),
            getattr(options, "buf_size", None),
        )
        output_options.extend(
            [
                "-profile:v", "high",
                "-bf", "2",
                "-g", str(max(1, fps // 2)),
                "-coder", "1",
                "-pix_fmt", "yuv420p",
            ]
        )  # fmt: skip
        return EncodeSpec(
            video_codec="libx264",
            filter_graph=join_filters(filters) or None,
            output_options=tuple(output_options),
            audio_codec="aac",
            audio_options=AAC_AUDIO_OPTIONS,
            container_flags=("-movflags", "+faststart"),
        )
