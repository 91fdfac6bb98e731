"""ffprobe-based implementation of the Prober protocol."""

import json
import subprocess  # nosec B404 - needed for TimeoutExpired
from pathlib import Path

from vdc.core.subprocess_utils import run_command
from vdc.domain.models import StreamMetadata
from vdc.introspector.interface import MediaIntrospectionError
from vdc.introspector.parsers import parse_ffprobe_output

# Prevent hangs on corrupted files
PROBE_TIMEOUT = 60


class FFprobeProber:
    """Extracts stream metadata from media files using ffprobe."""

    def __init__(self, ffprobe_path: Path) -> None:
        self._ffprobe_path = ffprobe_path

    def probe(self, path: Path) -> StreamMetadata:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            StreamMetadata for the file.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        try:
            data = self._run_ffprobe(path)
        except subprocess.TimeoutExpired as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e

        return parse_ffprobe_output(data, str(path))

    def _run_ffprobe(self, path: Path) -> dict:
        """Run ffprobe and return parsed JSON output.

        Raises:
            subprocess.TimeoutExpired: If ffprobe hangs.
            json.JSONDecodeError: If output is not valid JSON.
            MediaIntrospectionError: If ffprobe fails or output is incomplete.
        """
        stdout, stderr, returncode = run_command(
            [
                self._ffprobe_path,
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                path,
            ],
            timeout=PROBE_TIMEOUT,
        )
        if returncode != 0:
            raise MediaIntrospectionError(
                f"ffprobe failed for {path}: {stderr.strip() or returncode}"
            )
        data = json.loads(stdout)

        if "streams" not in data or "format" not in data:
            raise MediaIntrospectionError(
                f"Missing 'streams' or 'format' in ffprobe output for {path}. "
                "File may be corrupted or not a valid media file."
            )
        return data
