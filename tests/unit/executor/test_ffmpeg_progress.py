"""Tests for ffmpeg progress parsing and throttling."""

import pytest

from vdc.executor.progress import (
    FFmpegProgress,
    ProgressThrottle,
    parse_stderr_progress,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestParseStderrProgress:
    """Tests for parse_stderr_progress."""

    def test_progress_line(self):
        line = (
            "frame=  250 fps= 25 q=28.0 size=    1024kB time=00:01:02.50 "
            "bitrate=1000.0kbits/s speed=2.5x"
        )

        progress = parse_stderr_progress(line)

        assert progress is not None
        assert progress.frame == 250
        assert progress.fps == 25.0
        assert progress.out_time_seconds == pytest.approx(62.5)
        assert progress.speed == "2.5x"
        assert progress.total_size == 1024 * 1024

    def test_non_progress_line(self):
        assert parse_stderr_progress("Stream #0:0: Video: h264") is None

    def test_bitrate_na(self):
        progress = parse_stderr_progress("frame=1 fps=0.0 time=00:00:00.04 bitrate=N/A")

        assert progress.bitrate is None


class TestGetPercent:
    def test_percent(self):
        progress = FFmpegProgress(out_time_us=2_500_000)

        assert progress.get_percent(10) == 25.0

    def test_capped_at_100(self):
        assert FFmpegProgress(out_time_us=12_000_000).get_percent(10) == 100.0

    @pytest.mark.parametrize("duration", [None, 0])
    def test_unknown_duration(self, duration):
        assert FFmpegProgress(out_time_us=1_000_000).get_percent(duration) == 0.0

    def test_unknown_time(self):
        assert FFmpegProgress().get_percent(10) == 0.0


class TestProgressThrottle:
    """Tests for ProgressThrottle."""

    def test_small_advances_suppressed(self):
        throttle = ProgressThrottle(step=10, clock=FakeClock())

        assert throttle.observe(0) is None
        assert throttle.observe(5) is None
        assert throttle.observe(10.1) is None

    def test_reports_after_step(self):
        clock = FakeClock()
        throttle = ProgressThrottle(step=10, clock=clock)
        clock.now = 5.0

        update = throttle.observe(10.2)

        assert update is not None
        assert update.percent == 10
        assert update.eta_seconds == pytest.approx(45.0)

    def test_step_measured_from_last_report(self):
        clock = FakeClock()
        throttle = ProgressThrottle(step=10, clock=clock)
        clock.now = 2.0

        assert throttle.observe(12) is not None
        assert throttle.observe(20) is None
        assert throttle.observe(22.5).percent == 22

    def test_eta_with_fraction_below_one_percent(self):
        throttle = ProgressThrottle(step=0, clock=FakeClock())

        update = throttle.observe(0.5)

        assert update.percent == 0
        assert update.eta_seconds is None
