"""Profile strategy base types.

A profile turns filter stages, options and stream metadata into a
complete EncodeSpec for one output codec. The built-in profiles form a
closed set of subclasses; CustomProfile wraps an externally registered
converter function with the same input contract.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import ClassVar

from vdc.domain.enums import ProfileVariant
from vdc.domain.models import StreamMetadata
from vdc.exceptions import InvalidProfileError
from vdc.options import VideoOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodeSpec:
    """Complete, transcoder-agnostic description of one encode."""

    video_codec: str
    filter_graph: str | None = None
    output_options: tuple[str, ...] = ()
    audio_codec: str | None = None
    """None means the output carries no audio."""

    audio_options: tuple[str, ...] = ()
    container_flags: tuple[str, ...] = ()
    extra_inputs: tuple[Path, ...] = ()
    duration: float | None = None
    """Trim the output to this many seconds."""

    @property
    def has_audio(self) -> bool:
        return self.audio_codec is not None


Converter = Callable[[list[str], VideoOptions, StreamMetadata], EncodeSpec]
"""Signature of a custom profile converter."""

PostProcessor = Callable[[Path], None]
"""Optional in-place post-processing of a finished artifact."""


class Profile(ABC):
    """A named strategy for one output codec."""

    variant: ClassVar[ProfileVariant]

    def __init__(self, name: str, extension: str) -> None:
        self.name = name
        self.extension = extension
        self.post_process: PostProcessor | None = None

    @abstractmethod
    def build(
        self,
        filters: list[str],
        options: VideoOptions,
        metadata: StreamMetadata,
    ) -> EncodeSpec:
        """Build the encode specification.

        Args:
            filters: Ordered filter stages from the filter graph builder.
            options: Resolved options for this conversion.
            metadata: Probed source metadata.

        Returns:
            EncodeSpec for the transcoder.
        """

    def target_fps(self, options: VideoOptions, metadata: StreamMetadata) -> int:
        """Frame rate of the output: requested fps, else the source's."""
        fps = options.fps or metadata.current_fps
        if not fps:
            logger.warning(
                "Frame rate unknown for profile %s, assuming 30fps", self.name
            )
            return 30
        return fps

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, extension={self.extension!r})"


class CustomProfile(Profile):
    """Profile backed by an externally supplied converter function.

    Validated at construction: both an extension and a callable converter
    are required.
    """

    variant = ProfileVariant.CUSTOM

    def __init__(
        self,
        name: str,
        extension: str | None,
        converter: Converter | None,
        description: str | None = None,
    ) -> None:
        if not extension:
            raise InvalidProfileError(name, "extension")
        if converter is None:
            raise InvalidProfileError(name, "converter function")
        if not callable(converter):
            raise InvalidProfileError(
                name,
                "converter",
                f"ffmpeg profile {name!r} converter is not callable",
            )
        super().__init__(name, extension.lstrip("."))
        self.converter = converter
        self.description = description

    def build(
        self,
        filters: list[str],
        options: VideoOptions,
        metadata: StreamMetadata,
    ) -> EncodeSpec:
        spec = self.converter(list(filters), options, metadata)
        if not isinstance(spec, EncodeSpec):
            raise InvalidProfileError(
                self.name,
                "converter",
                f"ffmpeg profile {self.name!r} converter returned "
                f"{type(spec).__name__}, expected EncodeSpec",
            )
        return spec


@dataclass(frozen=True)
class ProfileConfig:
    """Configuration entry for a custom profile."""

    extension: str | None
    converter: Converter | None
    description: str | None = None
    source: str | None = field(default=None, compare=False)
    """Where the entry was loaded from, for error messages."""


def apply_option_inputs(
    spec: EncodeSpec,
    options: VideoOptions,
    root_dir: Path,
) -> EncodeSpec:
    """Apply the parts of the options that change inputs, not filters.

    A requested duration trims the output and drops audio; an overlay adds
    the overlay image (relative to ``root_dir``) as a second input.

    Args:
        spec: Spec produced by a profile.
        options: Conversion options.
        root_dir: Project root used to resolve the overlay path.

    Returns:
        Updated EncodeSpec.
    """
    if options.duration:
        spec = replace(spec, duration=options.duration, audio_codec=None, audio_options=())
    if options.overlay:
        overlay_path = (root_dir / options.overlay).resolve()
        spec = replace(spec, extra_inputs=(*spec.extra_inputs, overlay_path))
    return spec
