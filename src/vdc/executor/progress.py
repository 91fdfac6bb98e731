"""FFmpeg progress parsing and throttled progress reporting."""

from __future__ import annotations

import math
import re
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class FFmpegProgress:
    """One progress line from ffmpeg's stderr."""

    frame: int | None = None
    fps: float | None = None
    bitrate: str | None = None
    total_size: int | None = None
    out_time_us: int | None = None
    speed: str | None = None

    @property
    def out_time_seconds(self) -> float | None:
        if self.out_time_us is None:
            return None
        return self.out_time_us / 1_000_000

    def get_percent(self, duration_seconds: float | None) -> float:
        """Share of the expected output duration encoded so far.

        Returns 0.0 when either the duration or the output time is
        unknown, and never more than 100.0.
        """
        out_time = self.out_time_seconds
        if not duration_seconds or duration_seconds <= 0 or out_time is None:
            return 0.0
        return min(100.0, out_time / duration_seconds * 100)


# "frame=  250 fps= 25 q=28.0 size=    1024kB time=00:01:02.50 ..."
_FIELD_PATTERN = re.compile(r"(\w+)=\s*(\S+)")
_SIZE_UNITS = {"B": 1, "kB": 1024, "KiB": 1024, "MB": 1024**2, "MiB": 1024**2}


def _parse_int(value: str) -> int | None:
    return int(value) if value.isdigit() else None


def _parse_float(value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        return None


def _parse_size(value: str) -> int | None:
    match = re.fullmatch(r"(\d+)([A-Za-z]*)", value)
    if match is None:
        return None
    return int(match.group(1)) * _SIZE_UNITS.get(match.group(2), 1)


def _parse_clock(value: str) -> int | None:
    """HH:MM:SS.ss to microseconds."""
    parts = value.split(":")
    if len(parts) != 3 or value.startswith("-"):
        return None
    try:
        hours, minutes, seconds = int(parts[0]), int(parts[1]), float(parts[2])
    except ValueError:
        return None
    return round((hours * 3600 + minutes * 60 + seconds) * 1_000_000)


def _text(value: str) -> str | None:
    return None if value == "N/A" else value


_FIELD_PARSERS = {
    "frame": ("frame", _parse_int),
    "fps": ("fps", _parse_float),
    "size": ("total_size", _parse_size),
    "time": ("out_time_us", _parse_clock),
    "bitrate": ("bitrate", _text),
    "speed": ("speed", _text),
}


def parse_stderr_progress(line: str) -> FFmpegProgress | None:
    """Parse a stderr status line, or return None for any other line."""
    if "frame=" not in line:
        return None
    progress = FFmpegProgress()
    for key, raw in _FIELD_PATTERN.findall(line):
        if key not in _FIELD_PARSERS:
            continue
        attribute, parse = _FIELD_PARSERS[key]
        setattr(progress, attribute, parse(raw))
    return progress


@dataclass(frozen=True)
class ProgressUpdate:
    """A progress report that passed the throttle."""

    percent: int
    eta_seconds: float | None


class ProgressThrottle:
    """Lets a progress report through only after a minimum advance.

    The ETA is extrapolated linearly from elapsed time and percentage.
    """

    def __init__(
        self,
        step: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.step = step
        self._clock = clock
        self._started = clock()
        self._last_percent = 0.1

    def observe(self, percent: float) -> ProgressUpdate | None:
        """Record a percentage; return an update if it should be reported."""
        if percent <= self._last_percent + self.step:
            return None
        self._last_percent = percent
        whole = math.floor(percent)
        elapsed = math.ceil(self._clock() - self._started)
        eta = None
        if whole > 0:
            eta = (100 / whole) * elapsed - elapsed
        return ProgressUpdate(percent=whole, eta_seconds=eta)
