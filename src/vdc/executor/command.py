"""FFmpeg command construction.

Turns a transcoder-agnostic EncodeSpec into an ffmpeg argument list.
"""

from __future__ import annotations

from pathlib import Path

from vdc.profiles.base import EncodeSpec

# Quality of extracted JPEG frames (2 is near-lossless for mjpeg)
SCREENSHOT_QUALITY = "2"


def build_ffmpeg_command(
    ffmpeg: Path,
    spec: EncodeSpec,
    source: Path,
    destination: Path,
) -> list[str]:
    """Build the ffmpeg invocation for one encode.

    Args:
        ffmpeg: Path to the ffmpeg executable.
        spec: Encode specification from a profile.
        source: Input video.
        destination: Output file; the container is inferred from its
            extension.

    Returns:
        Command as a list of strings.
    """
    cmd = [str(ffmpeg), "-hide_banner", "-y", "-i", str(source)]
    for extra in spec.extra_inputs:
        cmd.extend(["-i", str(extra)])

    if spec.filter_graph:
        cmd.extend(["-filter_complex", spec.filter_graph])

    cmd.extend(["-c:v", spec.video_codec])
    cmd.extend(spec.output_options)

    if spec.has_audio:
        cmd.extend(["-c:a", str(spec.audio_codec)])
        cmd.extend(spec.audio_options)
    else:
        cmd.append("-an")

    cmd.extend(spec.container_flags)

    if spec.duration:
        cmd.extend(["-t", f"{spec.duration:g}"])

    cmd.append(str(destination))
    return cmd


def build_screenshot_command(
    ffmpeg: Path,
    source: Path,
    seconds: float,
    width: int,
    destination: Path,
) -> list[str]:
    """Build the ffmpeg invocation extracting one JPEG frame.

    Args:
        ffmpeg: Path to the ffmpeg executable.
        source: Input video.
        seconds: Timestamp of the frame.
        width: Output width; height keeps the aspect ratio.
        destination: Output JPEG path.

    Returns:
        Command as a list of strings.
    """
    return [
        str(ffmpeg),
        "-hide_banner",
        "-y",
        "-ss",
        f"{seconds:g}",
        "-i",
        str(source),
        "-frames:v",
        "1",
        "-vf",
        f"scale={width}:-2",
        "-q:v",
        SCREENSHOT_QUALITY,
        str(destination),
    ]
