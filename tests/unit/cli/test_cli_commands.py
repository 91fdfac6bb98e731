"""Tests for the vdc command line."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from vdc.cli import main
from vdc.config import VDCConfig
from vdc.domain import SkippedAsset
from vdc.exceptions import ToolNotFoundError
from vdc.tools import ToolPaths


@pytest.fixture
def config(temp_dir: Path) -> VDCConfig:
    return VDCConfig(
        cache_dir=temp_dir / "cache",
        cache_bin_dir=temp_dir / "bin",
        public_dir=temp_dir / "public",
        root_dir=temp_dir,
    )


@pytest.fixture
def invoke(config):
    """Run the CLI with a preloaded config and logging left untouched."""
    runner = CliRunner()

    def run(*args, obj_config=None):
        with patch("vdc.cli.configure_logging"):
            return runner.invoke(
                main, list(args), obj={"config": obj_config or config}
            )

    return run


def write_artifact(config: VDCConfig, tier: str, name: str) -> Path:
    path = config.cache_dir / tier / "videos" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"video")
    return path


class TestCacheCommands:
    """Tests for the cache command group."""

    def test_status_empty(self, invoke):
        result = invoke("cache", "status")

        assert result.exit_code == 0
        assert "active   absent" in result.output
        assert "rolling  absent" in result.output

    def test_status_json(self, invoke, config):
        write_artifact(config, "active", "k.mp4")

        result = invoke("cache", "status", "--format", "json")

        data = json.loads(result.output)
        assert data[0]["tier"] == "active"
        assert data[0]["videos"] == 1
        assert data[1]["exists"] is False

    def test_rotate_skipped_outside_production(self, invoke, config):
        artifact = write_artifact(config, "active", "k.mp4")

        result = invoke("cache", "rotate")

        assert result.exit_code == 0
        assert "Not a production build" in result.output
        assert artifact.exists()

    def test_rotate_forced(self, invoke, config):
        write_artifact(config, "active", "k.mp4")

        result = invoke("cache", "rotate", "--force")

        assert result.exit_code == 0
        assert "Cache tiers rotated" in result.output
        assert (config.cache_dir / "rolling" / "videos" / "k.mp4").exists()

    def test_reconcile(self, invoke, config):
        write_artifact(config, "rolling", "k.mp4")

        result = invoke("cache", "reconcile")

        assert result.exit_code == 0
        assert (config.cache_dir / "active" / "videos" / "k.mp4").exists()


class TestConvertCommand:
    """Tests for the convert command."""

    def test_non_video_skipped(self, invoke, temp_dir):
        image = temp_dir / "cover.png"
        image.write_bytes(b"png")

        with patch(
            "vdc.cli.runtime.resolve_tools",
            return_value=ToolPaths(Path("/bin/ffmpeg"), Path("/bin/ffprobe")),
        ):
            result = invoke("convert", str(image))

        assert result.exit_code == 0
        assert "Skipped" in result.output
        assert "image/png is not a video" in result.output

    def test_unknown_profile(self, invoke, temp_dir):
        video = temp_dir / "intro.mp4"
        video.write_bytes(b"video")

        with patch(
            "vdc.cli.runtime.resolve_tools",
            return_value=ToolPaths(Path("/bin/ffmpeg"), Path("/bin/ffprobe")),
        ):
            result = invoke("convert", str(video), "--profile", "av1")

        assert result.exit_code == 3
        assert "Unable to locate ffmpeg profile 'av1'" in result.output

    def test_invalid_options(self, invoke, temp_dir):
        video = temp_dir / "intro.mp4"
        video.write_bytes(b"video")

        with patch(
            "vdc.cli.runtime.resolve_tools",
            return_value=ToolPaths(Path("/bin/ffmpeg"), Path("/bin/ffprobe")),
        ):
            result = invoke("convert", str(video), "--crf", "99", "--format", "json")

        assert result.exit_code == 3
        error = json.loads(result.output)["error"]
        assert error["code"] == "CONFIGURATION_ERROR"
        assert "crf" in error["message"]

    def test_no_crf_passes_explicit_none(self, invoke):
        skipped = SkippedAsset("intro.mp4", "video/mp4", "stub")

        run = AsyncMock(return_value=skipped)
        with patch("vdc.cli.convert._convert", new=run):
            result = invoke(
                "convert", "intro.mp4", "--no-crf",
                "--max-rate", "2M", "--buf-size", "4M",
            )  # fmt: skip

        assert result.exit_code == 0
        values = run.call_args[0][5]
        assert values == {"crf": None, "max_rate": "2M", "buf_size": "4M"}

    def test_crf_and_no_crf_conflict(self, invoke):
        result = invoke("convert", "intro.mp4", "--crf", "20", "--no-crf")

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_missing_ffmpeg(self, invoke, temp_dir):
        with patch(
            "vdc.cli.runtime.resolve_tools",
            side_effect=ToolNotFoundError("ffmpeg"),
        ):
            result = invoke("convert", str(temp_dir / "intro.mp4"))

        assert result.exit_code == 4
        assert "ffmpeg is not installed or not in PATH" in result.output


class TestScreenshotsCommand:
    def test_non_video_skipped(self, invoke, temp_dir):
        document = temp_dir / "notes.txt"
        document.write_text("notes")

        with patch(
            "vdc.cli.runtime.resolve_tools",
            return_value=ToolPaths(Path("/bin/ffmpeg"), Path("/bin/ffprobe")),
        ):
            result = invoke("screenshots", str(document), "-t", "1")

        assert result.exit_code == 0
        assert "Skipped" in result.output
        assert "text/plain is not a video" in result.output


class TestProbeCommand:
    def test_probe_text(self, invoke, temp_dir, h264_1080p_fixture):
        video = temp_dir / "intro.mp4"
        video.write_bytes(b"video")

        with (
            patch("vdc.cli.probe.locate_tool", return_value=Path("/bin/ffprobe")),
            patch(
                "vdc.introspector.ffprobe.run_command",
                return_value=(json.dumps(h264_1080p_fixture), "", 0),
            ),
        ):
            result = invoke("probe", str(video))

        assert result.exit_code == 0
        assert "1920x1080" in result.output
        assert "#1 audio: aac" in result.output
        assert "2.5 MB" in result.output

    def test_probe_missing_tool(self, invoke, temp_dir):
        video = temp_dir / "intro.mp4"
        video.write_bytes(b"video")

        with patch(
            "vdc.cli.probe.locate_tool", side_effect=ToolNotFoundError("ffprobe")
        ):
            result = invoke("probe", str(video))

        assert result.exit_code == 4


def test_config_error_exit_code(temp_dir):
    config_path = temp_dir / "config.toml"
    config_path.write_text("[cache\n")

    result = CliRunner().invoke(main, ["--config", str(config_path), "cache", "status"])

    assert result.exit_code == 3
    assert "Invalid TOML" in result.output
