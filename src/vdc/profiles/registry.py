"""Profile registry.

Resolves profile names to strategies. Built-in profiles are always
present; custom profiles are validated when registered so configuration
mistakes surface before any transcoding starts.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from vdc.domain.enums import ProfileVariant
from vdc.exceptions import InvalidProfileError, UnknownProfileError
from vdc.profiles.base import (
    Converter,
    CustomProfile,
    PostProcessor,
    Profile,
    ProfileConfig,
)
from vdc.profiles.gif import GifProfile
from vdc.profiles.h264 import H264Profile
from vdc.profiles.h265 import H265Profile
from vdc.profiles.vp9 import VP9Profile
from vdc.profiles.webp import WebPProfile

logger = logging.getLogger(__name__)

# Custom profile names: letter first, then alphanumerics, hyphen, underscore
PROFILE_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]{0,63}$")

BUILTIN_PROFILES: tuple[type[Profile], ...] = (
    H264Profile,
    H265Profile,
    VP9Profile,
    WebPProfile,
    GifProfile,
)


class ProfileRegistry:
    """Name -> Profile lookup with eager validation of custom entries."""

    def __init__(
        self,
        custom: Mapping[str, ProfileConfig] | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            custom: Custom profile configurations keyed by name.

        Raises:
            InvalidProfileError: If a custom entry is incomplete.
        """
        self._profiles: dict[str, Profile] = {}
        for profile_type in BUILTIN_PROFILES:
            profile = profile_type()
            self._profiles[profile.name] = profile
        for name, config in (custom or {}).items():
            self.register(
                name,
                config.extension,
                config.converter,
                description=config.description,
            )

    def register(
        self,
        name: str,
        extension: str | None,
        converter: Converter | None,
        description: str | None = None,
    ) -> CustomProfile:
        """Register a custom profile.

        Args:
            name: Profile name.
            extension: Output file extension.
            converter: Function building the EncodeSpec.
            description: Optional human-readable description.

        Returns:
            The registered profile.

        Raises:
            InvalidProfileError: If the name is invalid or reserved, or the
                extension/converter is missing.
        """
        if not PROFILE_NAME_PATTERN.match(name):
            raise InvalidProfileError(
                name,
                "name",
                f"Invalid profile name {name!r}: must start with a letter and "
                "contain only letters, digits, hyphens and underscores",
            )
        existing = self._profiles.get(name)
        if existing is not None and existing.variant is not ProfileVariant.CUSTOM:
            raise InvalidProfileError(
                name, "name", f"Profile name {name!r} is reserved for a built-in"
            )
        profile = CustomProfile(name, extension, converter, description)
        if existing is not None:
            logger.info("Replacing custom profile %s", name)
        self._profiles[name] = profile
        logger.debug(
            "Registered custom profile %s (.%s)", name, profile.extension
        )
        return profile

    def get(self, name: str) -> Profile:
        """Look up a profile.

        Raises:
            UnknownProfileError: If no profile has that name.
        """
        try:
            return self._profiles[name]
        except KeyError:
            raise UnknownProfileError(name) from None

    def set_post_processor(
        self, name: str, post_process: PostProcessor | None
    ) -> None:
        """Attach a post-processor (e.g. lossy GIF optimisation) to a profile."""
        self.get(name).post_process = post_process

    def names(self) -> list[str]:
        """Registered profile names, built-ins first."""
        return list(self._profiles)

    def __contains__(self, name: object) -> bool:
        return name in self._profiles
