"""Tests for ffmpeg command construction."""

from pathlib import Path

from vdc.executor.command import build_ffmpeg_command, build_screenshot_command
from vdc.profiles import EncodeSpec

FFMPEG = Path("/usr/bin/ffmpeg")


class TestBuildFfmpegCommand:
    """Tests for build_ffmpeg_command."""

    def test_full_command(self):
        spec = EncodeSpec(
            video_codec="libx264",
            filter_graph="fps=30",
            output_options=("-crf", "28"),
            audio_codec="aac",
            audio_options=("-ac", "2"),
            container_flags=("-movflags", "+faststart"),
        )

        cmd = build_ffmpeg_command(FFMPEG, spec, Path("in.mov"), Path("out.mp4"))

        assert cmd == [
            "/usr/bin/ffmpeg", "-hide_banner", "-y",
            "-i", "in.mov",
            "-filter_complex", "fps=30",
            "-c:v", "libx264", "-crf", "28",
            "-c:a", "aac", "-ac", "2",
            "-movflags", "+faststart",
            "out.mp4",
        ]  # fmt: skip

    def test_no_audio(self):
        cmd = build_ffmpeg_command(
            FFMPEG, EncodeSpec("gif"), Path("in.mov"), Path("out.gif")
        )

        assert "-an" in cmd
        assert "-c:a" not in cmd
        assert "-filter_complex" not in cmd

    def test_extra_inputs_follow_source(self):
        spec = EncodeSpec("libx264", extra_inputs=(Path("/site/logo.png"),))

        cmd = build_ffmpeg_command(FFMPEG, spec, Path("in.mov"), Path("out.mp4"))

        assert cmd[3:7] == ["-i", "in.mov", "-i", "/site/logo.png"]

    def test_duration_before_destination(self):
        spec = EncodeSpec("libx264", duration=2.0)

        cmd = build_ffmpeg_command(FFMPEG, spec, Path("in.mov"), Path("out.mp4"))

        assert cmd[-3:] == ["-t", "2", "out.mp4"]


def test_screenshot_command():
    cmd = build_screenshot_command(
        FFMPEG, Path("in.mov"), 1.5, 600, Path("shots/1.5s.jpg")
    )

    assert cmd == [
        "/usr/bin/ffmpeg", "-hide_banner", "-y",
        "-ss", "1.5",
        "-i", "in.mov",
        "-frames:v", "1",
        "-vf", "scale=600:-2",
        "-q:v", "2",
        "shots/1.5s.jpg",
    ]  # fmt: skip
