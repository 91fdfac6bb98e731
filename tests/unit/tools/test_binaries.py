"""Tests for ffmpeg/ffprobe lookup."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from vdc.exceptions import ToolNotFoundError
from vdc.tools import locate_tool, platform_dir_name, resolve_tools


def make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    os.chmod(path, 0o755)
    return path


class TestLocateTool:
    """Tests for locate_tool."""

    def test_configured_path_wins(self, temp_dir):
        configured = make_executable(temp_dir / "custom" / "ffmpeg")

        with patch("vdc.tools.binaries.shutil.which", return_value="/usr/bin/ffmpeg"):
            assert locate_tool("ffmpeg", configured) == configured

    def test_configured_path_must_be_executable(self, temp_dir):
        configured = temp_dir / "ffmpeg"
        configured.write_text("not executable")

        with pytest.raises(ToolNotFoundError, match="not an executable file"):
            locate_tool("ffmpeg", configured)

    def test_path_lookup(self):
        with patch("vdc.tools.binaries.shutil.which", return_value="/usr/bin/ffprobe"):
            assert locate_tool("ffprobe") == Path("/usr/bin/ffprobe")

    def test_provisioned_binary(self, temp_dir):
        binary = make_executable(temp_dir / platform_dir_name() / "ffmpeg")

        with patch("vdc.tools.binaries.shutil.which", return_value=None):
            found = locate_tool(
                "ffmpeg", cache_bin_dir=temp_dir, download_binaries=True
            )

        assert found == binary

    def test_provisioned_binary_missing(self, temp_dir):
        with patch("vdc.tools.binaries.shutil.which", return_value=None):
            with pytest.raises(ToolNotFoundError, match="provisioned binary"):
                locate_tool("ffmpeg", cache_bin_dir=temp_dir, download_binaries=True)

    def test_provisioning_disabled(self, temp_dir):
        make_executable(temp_dir / platform_dir_name() / "ffmpeg")

        with patch("vdc.tools.binaries.shutil.which", return_value=None):
            with pytest.raises(ToolNotFoundError) as exc_info:
                locate_tool("ffmpeg", cache_bin_dir=temp_dir)

        assert exc_info.value.tool == "ffmpeg"
        assert "not installed or not in PATH" in str(exc_info.value)


def test_resolve_tools():
    with patch(
        "vdc.tools.binaries.shutil.which", side_effect=lambda tool: f"/opt/bin/{tool}"
    ):
        paths = resolve_tools()

    assert paths.ffmpeg == Path("/opt/bin/ffmpeg")
    assert paths.ffprobe == Path("/opt/bin/ffprobe")


def test_platform_dir_name():
    with (
        patch("vdc.tools.binaries.platform.machine", return_value="x86_64"),
        patch("vdc.tools.binaries.sys.platform", "linux"),
    ):
        assert platform_dir_name() == "linux-x64"
