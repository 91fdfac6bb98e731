"""Locate the ffmpeg and ffprobe executables.

Lookup order per tool: explicitly configured path, then PATH, then the
provisioned location ``<cache_bin_dir>/<platform>-<arch>/`` when binary
auto-provisioning is enabled. Provisioning itself happens outside this
package; a binary that is still missing is an error.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

from vdc.exceptions import ToolNotFoundError

logger = logging.getLogger(__name__)

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
}

INSTALL_HINT = (
    "Install ffmpeg, set VDC_FFMPEG_PATH / VDC_FFPROBE_PATH, or enable "
    "download_binaries"
)


@dataclass(frozen=True)
class ToolPaths:
    """Resolved executables."""

    ffmpeg: Path
    ffprobe: Path


def platform_dir_name() -> str:
    """Directory name for provisioned binaries, e.g. "linux-x64"."""
    machine = platform.machine().lower()
    return f"{sys.platform}-{_ARCH_ALIASES.get(machine, machine)}"


def executable_name(tool: str) -> str:
    return f"{tool}.exe" if sys.platform == "win32" else tool


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def locate_tool(
    tool: str,
    configured: Path | None = None,
    cache_bin_dir: Path | None = None,
    download_binaries: bool = False,
) -> Path:
    """Find one tool.

    Args:
        tool: "ffmpeg" or "ffprobe".
        configured: Explicit path from configuration.
        cache_bin_dir: Root of provisioned binaries.
        download_binaries: Whether provisioned binaries may be used.

    Returns:
        Path to the executable.

    Raises:
        ToolNotFoundError: If the tool cannot be found.
    """
    if configured is not None:
        if _is_executable(configured):
            return configured
        raise ToolNotFoundError(
            tool, f"Configured path {configured} is not an executable file"
        )

    found = shutil.which(tool)
    if found:
        return Path(found)

    if download_binaries and cache_bin_dir is not None:
        candidate = cache_bin_dir / platform_dir_name() / executable_name(tool)
        if _is_executable(candidate):
            logger.debug("Using provisioned %s at %s", tool, candidate)
            return candidate
        raise ToolNotFoundError(
            tool, f"Expected a provisioned binary at {candidate}"
        )

    raise ToolNotFoundError(tool, INSTALL_HINT)


def resolve_tools(
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    cache_bin_dir: Path | None = None,
    download_binaries: bool = False,
) -> ToolPaths:
    """Locate both ffmpeg and ffprobe.

    Raises:
        ToolNotFoundError: If either tool cannot be found.
    """
    return ToolPaths(
        ffmpeg=locate_tool("ffmpeg", ffmpeg_path, cache_bin_dir, download_binaries),
        ffprobe=locate_tool(
            "ffprobe", ffprobe_path, cache_bin_dir, download_binaries
        ),
    )
