"""Pydantic models for conversion options."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vdc.domain.enums import ProfileVariant
from vdc.exceptions import InvalidOptionsError

OverlayAnchor = Literal["start", "center", "end"]

# Rates such as "1500k", "2M" or a plain number of bits per second
_RATE_PATTERN = re.compile(r"^\d+(\.\d+)?[kKmM]?$")

# Timestamps in seconds ("1.5") or as a share of the duration ("50%")
_TIMESTAMP_PATTERN = re.compile(r"^\d+(\.\d+)?%?$")


def _validate_rate(value: str | None) -> str | None:
    if value is not None and not _RATE_PATTERN.match(value):
        raise ValueError(
            f"Invalid rate '{value}'. "
            "Must be a number optionally followed by k or M (e.g., '1500k')."
        )
    return value


class VideoOptions(BaseModel):
    """Options shared by every video profile."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_width: int | None = Field(default=1920, gt=0)
    max_height: int | None = Field(default=None, gt=0)
    duration: float | None = Field(default=None, gt=0)
    fps: int | None = Field(default=None, gt=0)
    saturation: float = Field(default=1.0, ge=0)
    overlay: str | None = None
    overlay_x: OverlayAnchor = "center"
    overlay_y: OverlayAnchor = "center"
    overlay_padding: int = Field(default=10, ge=0)
    public_path: str = "static/videos"

    @field_validator("public_path")
    @classmethod
    def validate_public_path(cls, v: str) -> str:
        """Reject public paths escaping the public directory."""
        parts = v.replace("\\", "/").split("/")
        if v.startswith("/") or ".." in parts:
            raise ValueError(f"public_path must be relative: {v!r}")
        return v

    def identity(self) -> dict[str, Any]:
        """Return the JSON-compatible content used for cache keys."""
        return self.model_dump(mode="json")


class H264Options(VideoOptions):
    """Options for the H.264 profile."""

    crf: int | None = Field(default=28, ge=0, le=51)
    preset: str | None = "medium"
    max_rate: str | None = None
    buf_size: str | None = None

    @field_validator("max_rate", "buf_size")
    @classmethod
    def validate_rates(cls, v: str | None) -> str | None:
        """Validate rate format."""
        return _validate_rate(v)


class H265Options(VideoOptions):
    """Options for the H.265 profile."""

    crf: int | None = Field(default=31, ge=0, le=51)
    preset: str | None = "medium"
    max_rate: str | None = None
    buf_size: str | None = None

    @field_validator("max_rate", "buf_size")
    @classmethod
    def validate_rates(cls, v: str | None) -> str | None:
        """Validate rate format."""
        return _validate_rate(v)


class VP9Options(VideoOptions):
    """Options for the VP9 profile.

    Bitrates left unset are picked from the resolution/frame-rate ladder.
    """

    crf: int | None = Field(default=31, ge=0, le=63)
    bitrate: str | None = None
    min_rate: str | None = None
    max_rate: str | None = None
    cpu_used: int = Field(default=1, ge=-8, le=8)

    @field_validator("bitrate", "min_rate", "max_rate")
    @classmethod
    def validate_rates(cls, v: str | None) -> str | None:
        """Validate rate format."""
        return _validate_rate(v)


class CustomOptions(VideoOptions):
    """Options for custom profiles; unknown fields are kept."""

    model_config = ConfigDict(extra="allow", frozen=True)


class ScreenshotOptions(BaseModel):
    """Options for screenshot extraction."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    timestamps: tuple[str, ...] = ("0",)
    width: int = Field(default=600, gt=0)

    @field_validator("timestamps", mode="before")
    @classmethod
    def coerce_timestamps(cls, v: Any) -> Any:
        """Accept numbers as well as strings."""
        if isinstance(v, (str, int, float)):
            v = [v]
        return tuple(str(item) for item in v)

    @field_validator("timestamps")
    @classmethod
    def validate_timestamps(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("At least one timestamp is required")
        for ts in v:
            if not _TIMESTAMP_PATTERN.match(ts):
                raise ValueError(
                    f"Invalid timestamp '{ts}'. Use seconds ('1.5') or a "
                    "percentage of the duration ('50%')."
                )
        return v

    def identity(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


OPTION_MODELS: dict[ProfileVariant, type[VideoOptions]] = {
    ProfileVariant.H264: H264Options,
    ProfileVariant.H265: H265Options,
    ProfileVariant.VP9: VP9Options,
    ProfileVariant.WEBP: VideoOptions,
    ProfileVariant.GIF: VideoOptions,
    ProfileVariant.CUSTOM: CustomOptions,
}


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "options"
        messages.append(f"{location}: {item['msg']}")
    return "; ".join(messages)


def _accepts_none(model: type[BaseModel], name: str) -> bool:
    field = model.model_fields.get(name)
    if field is None:
        # Extra fields are validated (or kept) by the model itself
        return True
    return type(None) in get_args(field.annotation)


def build_options(
    variant: ProfileVariant,
    values: Mapping[str, Any] | None = None,
    profile_name: str | None = None,
) -> VideoOptions:
    """Validate raw option values for a profile family.

    An explicit None is kept for fields that accept it, so ``crf=None``
    switches H.264/H.265 to max-rate/buffer-size rate control. For fields
    that cannot be None it is dropped and the default applies.

    Args:
        variant: Profile family the options are for.
        values: Raw option values.
        profile_name: Name used in error messages (defaults to the variant).

    Returns:
        Frozen option model.

    Raises:
        InvalidOptionsError: If validation fails.
    """
    model = OPTION_MODELS[variant]
    data = {
        k: v
        for k, v in (values or {}).items()
        if v is not None or _accepts_none(model, k)
    }
    try:
        return model(**data)
    except ValidationError as e:
        raise InvalidOptionsError(
            profile_name or variant.value, _format_validation_error(e)
        ) from e


def build_screenshot_options(
    values: Mapping[str, Any] | None = None,
) -> ScreenshotOptions:
    """Validate raw screenshot option values.

    Raises:
        InvalidOptionsError: If validation fails.
    """
    data = {k: v for k, v in (values or {}).items() if v is not None}
    try:
        return ScreenshotOptions(**data)
    except ValidationError as e:
        raise InvalidOptionsError("screenshots", _format_validation_error(e)) from e
