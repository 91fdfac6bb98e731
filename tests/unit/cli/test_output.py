"""Tests for CLI output helpers."""

import json
from pathlib import Path

import pytest

from vdc.cli.output import ExitCode, error_exit, exit_code_for, fail, to_json
from vdc.domain import CacheTier
from vdc.exceptions import (
    FetchError,
    InvalidOptionsError,
    ToolNotFoundError,
    TranscodeError,
    VDCError,
)


class TestExitCodeFor:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ToolNotFoundError("ffmpeg"), ExitCode.TOOL_NOT_FOUND),
            (InvalidOptionsError("h264", "bad"), ExitCode.CONFIGURATION_ERROR),
            (TranscodeError("x", "failed"), ExitCode.TRANSCODE_FAILED),
            (FetchError("http://x", 3, "failed"), ExitCode.FETCH_FAILED),
            (VDCError("other"), ExitCode.ERROR),
        ],
    )
    def test_mapping(self, error, code):
        assert exit_code_for(error) is code


class TestErrorExit:
    def test_text(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            error_exit("broken", ExitCode.ERROR)

        assert exc_info.value.code == 1
        assert capsys.readouterr().err == "Error: broken\n"

    def test_json(self, capsys):
        with pytest.raises(SystemExit):
            error_exit("broken", ExitCode.FETCH_FAILED, json_output=True)

        payload = json.loads(capsys.readouterr().err)
        assert payload == {
            "status": "failed",
            "error": {"code": "FETCH_FAILED", "message": "broken"},
        }

    def test_fail_appends_stderr(self, capsys):
        error = TranscodeError(
            "intro (h264)", "ffmpeg exited with code 1", stderr=["Unknown encoder\n"]
        )

        with pytest.raises(SystemExit) as exc_info:
            fail(error)

        assert exc_info.value.code == 5
        assert capsys.readouterr().err == (
            "Error: intro (h264) - ffmpeg exited with code 1\nUnknown encoder\n"
        )


def test_to_json_handles_paths_and_enums():
    data = json.loads(to_json({"path": Path("/tmp/x"), "tier": CacheTier.ROLLING}))

    assert data == {"path": "/tmp/x", "tier": "rolling"}
