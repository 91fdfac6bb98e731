"""Tests for domain models."""

from pathlib import Path

import pytest

from vdc.domain import (
    CacheKey,
    ConversionJob,
    RestoreOutcome,
    ScreenshotJob,
    StreamInfo,
    StreamMetadata,
)
from vdc.domain.models import parse_frame_rate
from vdc.options import ScreenshotOptions, VideoOptions


class TestParseFrameRate:
    @pytest.mark.parametrize(
        ("rate", "expected"),
        [
            ("30/1", 30.0),
            ("25", 25.0),
            ("60000/1001", 60000 / 1001),
        ],
    )
    def test_valid(self, rate, expected):
        assert parse_frame_rate(rate) == pytest.approx(expected)

    @pytest.mark.parametrize("rate", [None, "", "0/0", "abc/1", "30/0"])
    def test_invalid(self, rate):
        assert parse_frame_rate(rate) is None


class TestStreamMetadata:
    """Tests for derived StreamMetadata properties."""

    def test_first_video_stream_used(self):
        metadata = StreamMetadata(
            streams=(
                StreamInfo(index=0, codec_type="audio"),
                StreamInfo(
                    index=1,
                    codec_type="video",
                    width=1280,
                    height=720,
                    r_frame_rate="30000/1001",
                ),
            )
        )

        assert metadata.width == 1280
        assert metadata.height == 720
        assert metadata.current_fps == 30

    def test_no_video_stream(self):
        metadata = StreamMetadata(streams=(StreamInfo(index=0, codec_type="audio"),))

        assert metadata.width is None
        assert metadata.current_fps is None

    def test_avg_frame_rate_fallback(self):
        metadata = StreamMetadata(
            streams=(
                StreamInfo(
                    index=0,
                    codec_type="video",
                    r_frame_rate="0/0",
                    avg_frame_rate="24/1",
                ),
            )
        )

        assert metadata.current_fps == 24

    def test_source_duration_prefers_stream(self):
        metadata = StreamMetadata(
            streams=(StreamInfo(index=0, codec_type="video", duration=9.5),),
            duration=10.0,
        )

        assert metadata.source_duration == 9.5

    def test_source_duration_falls_back_to_container(self):
        metadata = StreamMetadata(
            streams=(StreamInfo(index=0, codec_type="video"),),
            duration=10.0,
        )

        assert metadata.source_duration == 10.0

    def test_source_duration_unknown(self):
        assert StreamMetadata().source_duration is None


class TestJobs:
    """Tests for job naming."""

    def test_cache_key_value_is_digest_first(self):
        key = CacheKey(source_digest="abc", options_hash="123")

        assert key.value == "abc-123"
        assert str(key) == "abc-123"

    def test_conversion_job_names(self, source_asset):
        job = ConversionJob(
            source=source_asset,
            profile_name="h264",
            options=VideoOptions(),
            cache_key=CacheKey("abc", "123"),
            extension="mp4",
            public_path=Path("/public/intro-abc-123.mp4"),
        )

        assert job.artifact_name == "abc-123.mp4"
        assert job.label == "intro (h264)"

    def test_screenshot_job_names(self, source_asset):
        job = ScreenshotJob(
            source=source_asset,
            options=ScreenshotOptions(timestamps=("1",)),
            cache_key=CacheKey("abc", "456"),
        )

        assert job.artifact_name == "abc-456"
        assert job.label == "intro (screenshots)"


def test_restore_outcome_hit():
    assert RestoreOutcome.ACTIVE_HIT.hit
    assert RestoreOutcome.PROMOTED.hit
    assert not RestoreOutcome.MISS.hit
