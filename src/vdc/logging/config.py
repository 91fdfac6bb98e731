"""Logging configuration."""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

from vdc.logging.context import JobContextFilter
from vdc.logging.handlers import JSONFormatter

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(job_tag)s%(message)s"

# Marker attribute identifying handlers installed by configure_logging
_HANDLER_MARKER = "_vdc_handler"


def configure_logging(
    level: str = "info",
    file: Path | None = None,
    fmt: str = "text",
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Handler:
    """Configure the ``vdc`` logger hierarchy.

    Replaces any handler previously installed by this function, so it is
    safe to call more than once.

    Args:
        level: Log level name (debug, info, warning, error).
        file: Log file path; stderr when None.
        fmt: "text" or "json".
        max_bytes: Rotate the log file at this size.
        backup_count: Number of rotated files to keep.

    Returns:
        The installed handler.

    Raises:
        ValueError: If level or fmt is not recognized.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    if fmt not in ("text", "json"):
        raise ValueError(f"Unknown log format: {fmt}")

    handler: logging.Handler
    if file is not None:
        file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler(sys.stderr)

    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    handler.addFilter(JobContextFilter())
    setattr(handler, _HANDLER_MARKER, True)

    root = logging.getLogger("vdc")
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(numeric_level)
    return handler
