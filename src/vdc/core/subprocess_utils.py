"""Short-lived external tool calls.

ffprobe and version checks go through run_command. Encodes are long
running and report progress, so they use vdc.executor.base instead.
"""

from __future__ import annotations

import logging
import shlex
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120


def describe_command(args: list[str], max_args: int | None = None) -> str:
    """Shell-quoted rendering of a command for log messages."""
    if max_args is not None and len(args) > max_args:
        return f"{shlex.join(args[:max_args])} ..."
    return shlex.join(args)


def run_command(
    args: list[str | Path],
    timeout: int = DEFAULT_TIMEOUT,
    **kwargs: Any,
) -> tuple[str, str, int]:
    """Run a tool to completion and capture its text output.

    Output is decoded as text with undecodable bytes replaced. Extra
    keyword arguments go to subprocess.run.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        subprocess.TimeoutExpired: If the tool runs longer than timeout.
            The child has already been killed when this is raised.
    """
    argv = [str(arg) for arg in args]
    tool = Path(argv[0]).name if argv else "unknown"
    logger.debug("Running %s", describe_command(argv), extra={"tool": tool})

    started = time.monotonic()
    try:
        completed = subprocess.run(  # nosec B603 - argv is built by vdc
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            **kwargs,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "%s timed out after %ds: %s",
            tool,
            timeout,
            describe_command(argv, max_args=3),
            extra={"tool": tool, "timeout_seconds": timeout},
        )
        raise

    logger.debug(
        "%s exited with %d",
        tool,
        completed.returncode,
        extra={"tool": tool, "elapsed_seconds": round(time.monotonic() - started, 3)},
    )
    return completed.stdout or "", completed.stderr or "", completed.returncode
