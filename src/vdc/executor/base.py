"""Base class for ffmpeg-driven executors.

ffmpeg writes its status lines to stderr. A reader thread pumps them into
a queue so the calling thread can parse progress as it arrives and still
enforce a timeout on a process that has stopped writing.
"""

import logging
import queue
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
import time
from abc import ABC
from collections.abc import Callable, Iterable
from pathlib import Path

from vdc.executor.progress import FFmpegProgress, parse_stderr_progress

logger = logging.getLogger(__name__)

TEMP_PREFIX = ".vdc_temp_"

ProgressCallback = Callable[[FFmpegProgress], None]


def create_temp_output(output_path: Path, prefix: str = TEMP_PREFIX) -> Path:
    """Sibling path an encode writes to before it is moved into place."""
    return output_path.with_name(f"{prefix}{output_path.name}")


def cleanup_temp_file(path: Path) -> None:
    """Remove a temporary file, logging any errors."""
    if not path.exists():
        return
    try:
        path.unlink()
    except OSError as e:
        logger.warning("Could not clean up temp file %s: %s", path, e)
    else:
        logger.debug("Cleaned up temp file: %s", path)


class _StderrPump:
    """Copies lines from a pipe into a queue on a daemon thread.

    ``None`` is queued once the pipe is exhausted or closed.
    """

    def __init__(self, stream: Iterable[str]) -> None:
        self._stream = stream
        self._lines: queue.Queue[str | None] = queue.Queue()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        try:
            for line in self._stream:
                self._lines.put(line)
        except (ValueError, OSError) as e:
            # Pipe closed under us after a kill
            logger.debug("Stderr reader stopped: %s", e)
        finally:
            self._lines.put(None)

    def next_line(self, wait: float) -> str | None:
        """Next line, ``""`` if none arrived within ``wait``, None at the end."""
        try:
            return self._lines.get(timeout=wait)
        except queue.Empty:
            return ""

    def drain(self, wait: float) -> list[str]:
        """Let the reader finish, then return whatever is left."""
        self._thread.join(timeout=wait)
        remaining = []
        while True:
            try:
                line = self._lines.get_nowait()
            except queue.Empty:
                break
            if line is None:
                break
            remaining.append(line)
        return remaining

    def join(self, wait: float) -> bool:
        """Wait for the reader; return False if it is still alive."""
        self._thread.join(timeout=wait)
        return not self._thread.is_alive()


class FFmpegExecutorBase(ABC):
    """Shared ffmpeg invocation for TranscodeExecutor and ScreenshotExtractor.

    Subclasses build their own command and call _run_ffmpeg_with_timeout.
    """

    STDERR_DRAIN_TIMEOUT: float = 5.0
    POLL_INTERVAL: float = 1.0

    def __init__(self, ffmpeg_path: Path, timeout: float | None = None) -> None:
        """Initialize the executor.

        Args:
            ffmpeg_path: Path to the ffmpeg executable.
            timeout: Maximum seconds per invocation. None means no limit.
        """
        self.tool_path = ffmpeg_path
        self._timeout = timeout

    def _run_ffmpeg_with_timeout(
        self,
        cmd: list[str],
        description: str,
        timeout: float | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> tuple[bool, int, list[str]]:
        """Run ffmpeg, feeding parsed status lines to progress_callback.

        Args:
            cmd: Full ffmpeg argv.
            description: Label for log messages.
            timeout: Seconds before the process is killed. None = no limit.
            progress_callback: Receives each parsed status line.

        Returns:
            Tuple of (success, returncode, stderr_lines). returncode is -1
            when the timeout killed the process.
        """
        process = subprocess.Popen(  # nosec B603 - argv is built by vdc
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
        assert process.stderr is not None
        pump = _StderrPump(process.stderr)
        pump.start()

        stderr_lines: list[str] = []
        started = time.monotonic()
        while True:
            if timeout is not None and time.monotonic() - started >= timeout:
                self._kill(process, pump, description, timeout)
                return (False, -1, stderr_lines)
            if process.poll() is not None:
                break
            line = pump.next_line(self.POLL_INTERVAL)
            if line is None:
                break
            if line:
                stderr_lines.append(line)
                self._report_progress(line, progress_callback)

        stderr_lines.extend(pump.drain(self.STDERR_DRAIN_TIMEOUT))
        process.wait()
        return (process.returncode == 0, process.returncode, stderr_lines)

    @staticmethod
    def _report_progress(line: str, callback: ProgressCallback | None) -> None:
        if callback is None:
            return
        progress = parse_stderr_progress(line)
        if progress is None:
            return
        try:
            callback(progress)
        except Exception as e:
            logger.warning("Progress callback error: %s", e)

    @staticmethod
    def _kill(
        process: subprocess.Popen,
        pump: _StderrPump,
        description: str,
        timeout: float,
    ) -> None:
        logger.warning("%s timed out after %s seconds", description, timeout)
        process.kill()
        if process.stderr:
            try:
                # Unblocks the reader thread
                process.stderr.close()
            except OSError as e:
                logger.debug("Closing stderr after kill failed: %s", e)
        process.wait()
        if not pump.join(2.0):
            logger.error(
                "Stderr reader for %s did not stop after the kill; abandoning it",
                description,
            )
