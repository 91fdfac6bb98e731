"""FFmpeg execution: command construction, progress and runners."""

from vdc.executor.command import build_ffmpeg_command, build_screenshot_command
from vdc.executor.progress import (
    FFmpegProgress,
    ProgressThrottle,
    ProgressUpdate,
    parse_stderr_progress,
)
from vdc.executor.screenshots import ScreenshotExtractor, frame_name, resolve_timestamp
from vdc.executor.transcode import TranscodeExecutor

__all__ = [
    "FFmpegProgress",
    "ProgressThrottle",
    "ProgressUpdate",
    "ScreenshotExtractor",
    "TranscodeExecutor",
    "build_ffmpeg_command",
    "build_screenshot_command",
    "frame_name",
    "parse_stderr_progress",
    "resolve_timestamp",
]
