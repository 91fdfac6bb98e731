"""Codec profiles.

Usage:
    from vdc.profiles import ProfileRegistry

    registry = ProfileRegistry()
    spec = registry.get("vp9").build(filters, options, metadata)
"""

from vdc.profiles.base import (
    Converter,
    CustomProfile,
    EncodeSpec,
    PostProcessor,
    Profile,
    ProfileConfig,
    apply_option_inputs,
)
from vdc.profiles.gif import GifProfile
from vdc.profiles.h264 import H264Profile
from vdc.profiles.h265 import H265Profile
from vdc.profiles.registry import ProfileRegistry
from vdc.profiles.vp9 import BITRATE_LADDER, VP9Profile, select_bitrates
from vdc.profiles.webp import WebPProfile

__all__ = [
    "BITRATE_LADDER",
    "Converter",
    "CustomProfile",
    "EncodeSpec",
    "GifProfile",
    "H264Profile",
    "H265Profile",
    "PostProcessor",
    "Profile",
    "ProfileConfig",
    "ProfileRegistry",
    "VP9Profile",
    "WebPProfile",
    "apply_option_inputs",
    "select_bitrates",
]
