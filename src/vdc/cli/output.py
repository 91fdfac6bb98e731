"""CLI output helpers and exit codes."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, is_dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, NoReturn

import click

from vdc.exceptions import (
    ConfigurationError,
    FetchError,
    ToolNotFoundError,
    TranscodeError,
    VDCError,
)


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    ERROR = 1
    CONFIGURATION_ERROR = 3
    TOOL_NOT_FOUND = 4
    TRANSCODE_FAILED = 5
    FETCH_FAILED = 6


def exit_code_for(error: VDCError) -> ExitCode:
    """Map an error to its exit code."""
    if isinstance(error, ToolNotFoundError):
        return ExitCode.TOOL_NOT_FOUND
    if isinstance(error, ConfigurationError):
        return ExitCode.CONFIGURATION_ERROR
    if isinstance(error, TranscodeError):
        return ExitCode.TRANSCODE_FAILED
    if isinstance(error, FetchError):
        return ExitCode.FETCH_FAILED
    return ExitCode.ERROR


def error_exit(
    message: str,
    code: ExitCode | int,
    json_output: bool = False,
) -> NoReturn:
    """Exit with a formatted error message.

    Note:
        This function never returns; it always calls sys.exit().
    """
    if isinstance(code, ExitCode):
        code_name = code.name
        exit_value = int(code)
    else:
        code_name = "UNKNOWN_ERROR"
        exit_value = code

    if json_output:
        click.echo(
            json.dumps(
                {
                    "status": "failed",
                    "error": {"code": code_name, "message": message},
                }
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(exit_value)


def fail(error: VDCError, json_output: bool = False) -> NoReturn:
    """Exit for a VDCError, appending transcoder stderr when present."""
    message = str(error)
    if isinstance(error, TranscodeError) and error.stderr_tail and not json_output:
        message = f"{message}\n{error.stderr_tail}"
    error_exit(message, exit_code_for(error), json_output)


def _json_default(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(data: Any) -> str:
    """Serialize dataclasses, Paths and Enums to indented JSON."""
    if is_dataclass(data) and not isinstance(data, type):
        data = asdict(data)
    return json.dumps(data, indent=2, default=_json_default)


def echo_fields(data: dict[str, Any]) -> None:
    """Print key: value lines, skipping empty values."""
    width = max((len(key) for key in data), default=0)
    for key, value in data.items():
        if value is None or value == ():
            continue
        click.echo(f"{key.ljust(width)}  {value}")


format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format.",
)
