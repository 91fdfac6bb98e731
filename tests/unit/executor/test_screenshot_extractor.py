"""Tests for ScreenshotExtractor."""

from pathlib import Path
from unittest.mock import patch

import pytest

from vdc.exceptions import TranscodeError
from vdc.executor import ScreenshotExtractor
from vdc.executor.screenshots import frame_name, resolve_timestamp
from vdc.introspector import MediaIntrospectionError


def fake_ffmpeg(returncode=0, write_output=True):
    calls = []

    def run(cmd, description, timeout=None, progress_callback=None):
        calls.append(cmd)
        if write_output:
            Path(cmd[-1]).write_bytes(b"jpg")
        return returncode == 0, returncode, []

    run.calls = calls
    return run


class TestResolveTimestamp:
    def test_seconds(self):
        assert resolve_timestamp("1.5", None) == 1.5

    def test_percentage(self):
        assert resolve_timestamp("50%", 10.0) == 5.0

    def test_percentage_needs_duration(self):
        with pytest.raises(MediaIntrospectionError, match="duration unknown"):
            resolve_timestamp("50%", None)

    def test_frame_name(self):
        assert frame_name(5.0) == "5s.jpg"
        assert frame_name(1.25) == "1.25s.jpg"


class TestScreenshotExtractor:
    """Tests for ScreenshotExtractor.extract."""

    def test_one_frame_per_timestamp(self, temp_dir, reporter):
        extractor = ScreenshotExtractor(Path("ffmpeg"), reporter=reporter)
        run = fake_ffmpeg()

        with patch.object(extractor, "_run_ffmpeg_with_timeout", side_effect=run):
            paths = extractor.extract(
                temp_dir / "in.mov",
                ["1", "50%"],
                480,
                temp_dir / "shots",
                label="intro (screenshots)",
                duration=8.0,
            )

        assert [p.name for p in paths] == ["1s.jpg", "4s.jpg"]
        assert all(p.exists() for p in paths)
        assert "scale=480:-2" in run.calls[0]
        assert reporter.texts("info")[0] == "intro (screenshots) - Taking 2 screenshots"

    def test_duplicate_timestamps_extracted_once(self, temp_dir):
        extractor = ScreenshotExtractor(Path("ffmpeg"))
        run = fake_ffmpeg()

        with patch.object(extractor, "_run_ffmpeg_with_timeout", side_effect=run):
            paths = extractor.extract(
                temp_dir / "in.mov", ["2", "2.0"], 600, temp_dir / "shots", label="x"
            )

        assert len(paths) == 1
        assert len(run.calls) == 1

    def test_failure_raises(self, temp_dir):
        extractor = ScreenshotExtractor(Path("ffmpeg"))

        with patch.object(
            extractor, "_run_ffmpeg_with_timeout", side_effect=fake_ffmpeg(returncode=1)
        ):
            with pytest.raises(TranscodeError, match="Screenshot at 1s failed"):
                extractor.extract(
                    temp_dir / "in.mov", ["1"], 600, temp_dir / "shots", label="x"
                )

    def test_missing_frame_raises(self, temp_dir):
        extractor = ScreenshotExtractor(Path("ffmpeg"))

        with patch.object(
            extractor,
            "_run_ffmpeg_with_timeout",
            side_effect=fake_ffmpeg(write_output=False),
        ):
            with pytest.raises(TranscodeError, match="No frame at 99s"):
                extractor.extract(
                    temp_dir / "in.mov", ["99"], 600, temp_dir / "shots", label="x"
                )
