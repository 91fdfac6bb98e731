"""Exception hierarchy for the Video Delivery Converter.

All errors raised by the conversion core inherit from VDCError, allowing
callers to catch everything with a single except clause if desired.
Assets that are not videos are not errors; they resolve to a SkippedAsset
value instead (see vdc.domain.models).
"""

from __future__ import annotations


class VDCError(Exception):
    """Base exception for conversion errors."""


class ConfigurationError(VDCError):
    """Raised for fatal configuration problems.

    Configuration errors are surfaced immediately and never retried.
    """


class UnknownProfileError(ConfigurationError):
    """Raised when a profile name is not registered.

    Attributes:
        name: The profile name that was requested.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unable to locate ffmpeg profile {name!r}")


class InvalidProfileError(ConfigurationError):
    """Raised when a custom profile is missing its extension or converter.

    Attributes:
        name: The profile name.
        field: The missing or invalid field.
    """

    def __init__(self, name: str, field: str, message: str | None = None) -> None:
        self.name = name
        self.field = field
        super().__init__(
            message or f"ffmpeg profile {name!r} has no {field} specified"
        )


class MissingFileTypeError(ConfigurationError):
    """Raised when the media type of an asset cannot be determined."""

    def __init__(self, asset_id: str) -> None:
        self.asset_id = asset_id
        super().__init__(f"Unable to extract asset file type for {asset_id}")


class SourceIdentityError(ConfigurationError):
    """Raised when a source has neither a digest nor content to digest."""


class ToolNotFoundError(ConfigurationError):
    """Raised when ffmpeg or ffprobe cannot be located."""

    def __init__(self, tool: str, hint: str = "") -> None:
        self.tool = tool
        message = f"{tool} is not installed or not in PATH"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class FetchError(VDCError):
    """Raised when a remote asset could not be downloaded.

    Attributes:
        url: The URL that failed.
        attempts: Number of attempts made before giving up.
    """

    def __init__(self, url: str, attempts: int, message: str) -> None:
        self.url = url
        self.attempts = attempts
        super().__init__(message)


class TranscodeError(VDCError):
    """Raised when the external transcoder reports a failure.

    Attributes:
        label: Task label of the failed job.
        returncode: Process return code (-1 on timeout).
        stderr: Captured stderr lines for diagnosis.
        command: The command that was executed.
    """

    def __init__(
        self,
        label: str,
        message: str,
        returncode: int | None = None,
        stderr: list[str] | None = None,
        command: list[str] | None = None,
    ) -> None:
        self.label = label
        self.returncode = returncode
        self.stderr = stderr or []
        self.command = command or []
        super().__init__(f"{label} - {message}")

    @property
    def stderr_tail(self) -> str:
        """Return the last lines of stderr, joined for display."""
        return "".join(self.stderr[-20:]).strip()


class InvalidOptionsError(ConfigurationError):
    """Raised when conversion options fail validation."""

    def __init__(self, profile: str, message: str) -> None:
        self.profile = profile
        super().__init__(f"Invalid options for profile {profile!r}: {message}")
