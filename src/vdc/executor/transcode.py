"""TranscodeExecutor: drive one ffmpeg encode to completion."""

from __future__ import annotations

import asyncio
import logging
import shlex
from pathlib import Path

from vdc.core.formatting import format_eta
from vdc.exceptions import TranscodeError
from vdc.executor.base import (
    FFmpegExecutorBase,
    cleanup_temp_file,
    create_temp_output,
)
from vdc.executor.command import build_ffmpeg_command
from vdc.executor.progress import FFmpegProgress, ProgressThrottle
from vdc.logging.reporter import NullReporter, Reporter
from vdc.profiles.base import EncodeSpec

logger = logging.getLogger(__name__)


class TranscodeExecutor(FFmpegExecutorBase):
    """Runs an EncodeSpec through ffmpeg.

    Reports the resolved command on start, throttled progress while
    running, and success or failure at the end. Output is written to a
    temp sibling file and renamed onto the destination only on success,
    so a failed run never leaves a file at the destination.
    """

    def __init__(
        self,
        ffmpeg_path: Path,
        reporter: Reporter | None = None,
        timeout: float | None = None,
        progress_step: float = 10.0,
    ) -> None:
        super().__init__(ffmpeg_path, timeout)
        self._reporter = reporter or NullReporter()
        self._progress_step = progress_step

    def run(
        self,
        spec: EncodeSpec,
        source: Path,
        destination: Path,
        *,
        label: str,
        duration_seconds: float | None = None,
    ) -> Path:
        """Encode source into destination.

        Args:
            spec: Encode specification.
            source: Input video.
            destination: Final output path.
            label: Task label for messages.
            duration_seconds: Expected output duration, for progress.

        Returns:
            The destination path.

        Raises:
            TranscodeError: If ffmpeg fails or times out.
        """
        destination.parent.mkdir(parents=True, exist_ok=True)
        temp_path = create_temp_output(destination)
        cmd = build_ffmpeg_command(self.tool_path, spec, source, temp_path)

        self._reporter.info(f"{label} - Started encoding")
        self._reporter.verbose(f"{label} - Executing: {shlex.join(cmd)}")

        throttle = ProgressThrottle(step=self._progress_step)

        def on_progress(progress: FFmpegProgress) -> None:
            percent = progress.get_percent(duration_seconds)
            update = throttle.observe(percent)
            if update is None:
                return
            eta = format_eta(update.eta_seconds)
            suffix = f" ({eta})" if eta else ""
            self._reporter.info(f"{label} - {update.percent}%{suffix}")

        try:
            success, returncode, stderr = self._run_ffmpeg_with_timeout(
                cmd,
                description=label,
                timeout=self._timeout,
                progress_callback=on_progress,
            )
        except OSError as e:
            cleanup_temp_file(temp_path)
            raise TranscodeError(
                label, f"Failed to start ffmpeg: {e}", command=cmd
            ) from e

        if not success:
            cleanup_temp_file(temp_path)
            message = (
                f"Timed out after {self._timeout}s"
                if returncode == -1
                else f"ffmpeg exited with code {returncode}"
            )
            error = TranscodeError(
                label, message, returncode=returncode, stderr=stderr, command=cmd
            )
            self._reporter.error(f"{label} - Failed: {message}", error)
            logger.debug("ffmpeg stderr for %s:\n%s", label, error.stderr_tail)
            raise error

        try:
            temp_path.replace(destination)
        except OSError as e:
            cleanup_temp_file(temp_path)
            raise TranscodeError(
                label, f"Could not move output into place: {e}", command=cmd
            ) from e

        self._reporter.info(f"{label} - Finished encoding")
        return destination

    async def run_async(
        self,
        spec: EncodeSpec,
        source: Path,
        destination: Path,
        *,
        label: str,
        duration_seconds: float | None = None,
    ) -> Path:
        """Run in a worker thread so the event loop keeps scheduling."""
        return await asyncio.to_thread(
            self.run,
            spec,
            source,
            destination,
            label=label,
            duration_seconds=duration_seconds,
        )
