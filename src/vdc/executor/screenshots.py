"""Screenshot extraction: one JPEG frame per requested timestamp."""

from __future__ import annotations

import asyncio
import logging
import shlex
from collections.abc import Sequence
from pathlib import Path

from vdc.exceptions import TranscodeError
from vdc.executor.base import FFmpegExecutorBase
from vdc.executor.command import build_screenshot_command
from vdc.introspector.interface import MediaIntrospectionError
from vdc.logging.reporter import NullReporter, Reporter

logger = logging.getLogger(__name__)


def resolve_timestamp(timestamp: str, duration: float | None) -> float:
    """Resolve a timestamp to seconds.

    Args:
        timestamp: Seconds ("1.5") or a share of the duration ("50%").
        duration: Source duration, required for percentages.

    Returns:
        Offset in seconds.

    Raises:
        MediaIntrospectionError: If a percentage is given and the duration
            is unknown.
    """
    if timestamp.endswith("%"):
        if not duration:
            raise MediaIntrospectionError(
                f"Cannot resolve timestamp {timestamp!r}: source duration unknown"
            )
        return duration * float(timestamp[:-1]) / 100
    return float(timestamp)


def frame_name(seconds: float) -> str:
    """File name of the frame captured at ``seconds``."""
    return f"{seconds:g}s.jpg"


class ScreenshotExtractor(FFmpegExecutorBase):
    """Captures frames from a video into a directory."""

    def __init__(
        self,
        ffmpeg_path: Path,
        reporter: Reporter | None = None,
        timeout: float | None = 120,
    ) -> None:
        super().__init__(ffmpeg_path, timeout)
        self._reporter = reporter or NullReporter()

    def extract(
        self,
        source: Path,
        timestamps: Sequence[str],
        width: int,
        destination_dir: Path,
        *,
        label: str,
        duration: float | None = None,
    ) -> list[Path]:
        """Extract one frame per timestamp into destination_dir.

        Args:
            source: Input video.
            timestamps: Timestamps in seconds or percentages.
            width: Frame width; height keeps the aspect ratio.
            destination_dir: Directory receiving ``<seconds>s.jpg`` files.
            label: Task label for messages.
            duration: Source duration for percentage timestamps.

        Returns:
            Paths of the extracted frames, in timestamp order.

        Raises:
            TranscodeError: If a frame could not be extracted.
            MediaIntrospectionError: If a percentage cannot be resolved.
        """
        destination_dir.mkdir(parents=True, exist_ok=True)
        seconds_list = [resolve_timestamp(ts, duration) for ts in timestamps]
        self._reporter.info(f"{label} - Taking {len(seconds_list)} screenshots")

        paths: list[Path] = []
        for seconds in seconds_list:
            output = destination_dir / frame_name(seconds)
            if output in paths:
                continue
            cmd = build_screenshot_command(
                self.tool_path, source, seconds, width, output
            )
            self._reporter.verbose(f"{label} - Executing: {shlex.join(cmd)}")
            success, returncode, stderr = self._run_ffmpeg_with_timeout(
                cmd, description=label, timeout=self._timeout
            )
            if not success:
                raise TranscodeError(
                    label,
                    f"Screenshot at {seconds:g}s failed (exit {returncode})",
                    returncode=returncode,
                    stderr=stderr,
                    command=cmd,
                )
            if not output.exists():
                raise TranscodeError(
                    label,
                    f"No frame at {seconds:g}s (beyond the end of the video?)",
                    returncode=returncode,
                    stderr=stderr,
                    command=cmd,
                )
            paths.append(output)

        self._reporter.info(f"{label} - Finished screenshots")
        return paths

    async def extract_async(
        self,
        source: Path,
        timestamps: Sequence[str],
        width: int,
        destination_dir: Path,
        *,
        label: str,
        duration: float | None = None,
    ) -> list[Path]:
        return await asyncio.to_thread(
            self.extract,
            source,
            timestamps,
            width,
            destination_dir,
            label=label,
            duration=duration,
        )
