"""Custom profile definitions.

Custom profiles come from the ``[profiles.<name>]`` tables of the TOML
config file and from YAML files in ``<config dir>/profiles/<name>.yaml``.
Each entry names an output extension and a converter given as
``"package.module:function"``. Converters are imported eagerly so a bad
entry fails at load time rather than in the middle of a build.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from vdc.exceptions import InvalidProfileError
from vdc.profiles.base import Converter, ProfileConfig

logger = logging.getLogger(__name__)

_VALID_KEYS = frozenset({"extension", "converter", "description"})


def import_converter(
    name: str, reference: str, field: str = "converter"
) -> Converter:
    """Resolve a "module:function" reference.

    ``field`` names the setting in error messages (``converter`` for
    custom profiles, ``post_processor`` for the GIF optimiser).

    Raises:
        InvalidProfileError: If the reference is malformed, cannot be
            imported or is not callable.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise InvalidProfileError(
            name,
            field,
            f"ffmpeg profile {name!r} {field} must look like "
            f"'package.module:function', got {reference!r}",
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidProfileError(
            name, field, f"Cannot import {module_name!r} for profile {name!r}: {e}"
        ) from e

    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise InvalidProfileError(
                name,
                field,
                f"{module_name!r} has no attribute {attr!r} (profile {name!r})",
            ) from e
    if not callable(target):
        raise InvalidProfileError(
            name, field, f"ffmpeg profile {name!r} {field} is not callable"
        )
    return target


def parse_profile_entry(
    name: str, data: Mapping[str, Any], source: str
) -> ProfileConfig:
    """Validate one profile table.

    Raises:
        InvalidProfileError: On unknown keys, a missing extension or
            converter, or an unresolvable converter.
    """
    unknown = set(data) - _VALID_KEYS
    if unknown:
        raise InvalidProfileError(
            name,
            "keys",
            f"Unknown keys in profile {name!r} ({source}): {sorted(unknown)}. "
            f"Valid keys are: {sorted(_VALID_KEYS)}",
        )
    extension = data.get("extension")
    if not extension:
        raise InvalidProfileError(name, "extension")
    reference = data.get("converter")
    if not reference:
        raise InvalidProfileError(name, "converter function")
    converter = (
        reference if callable(reference) else import_converter(name, str(reference))
    )
    return ProfileConfig(
        extension=str(extension),
        converter=converter,
        description=data.get("description"),
        source=source,
    )


def load_profile_file(path: Path) -> ProfileConfig:
    """Load one YAML profile file; the profile name is the file stem.

    Raises:
        InvalidProfileError: If the YAML is invalid or the entry incomplete.
    """
    name = path.stem
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidProfileError(
            name, "yaml", f"Invalid YAML in profile {name!r}: {e}"
        ) from e
    if not isinstance(data, dict):
        raise InvalidProfileError(
            name, "yaml", f"Profile {name!r} must be a mapping, got {type(data).__name__}"
        )
    return parse_profile_entry(name, data, str(path))


def list_profile_files(profiles_dir: Path) -> list[Path]:
    """YAML profile files in a directory, sorted by name."""
    if not profiles_dir.is_dir():
        return []
    return sorted(
        p
        for p in profiles_dir.glob("*.yaml")
        if p.is_file() and not p.name.startswith(".")
    )


def load_profiles(
    file_profiles: Mapping[str, Any],
    profiles_dir: Path | None,
    source: str = "config file",
) -> dict[str, ProfileConfig]:
    """Merge YAML-file and TOML-table profiles; TOML wins on clashes.

    Args:
        file_profiles: ``[profiles]`` table of the config file.
        profiles_dir: Directory of YAML profile files.
        source: Description of the TOML source, for error messages.

    Returns:
        Profile configs by name.
    """
    profiles: dict[str, ProfileConfig] = {}
    if profiles_dir is not None:
        for path in list_profile_files(profiles_dir):
            profiles[path.stem] = load_profile_file(path)

    for name, data in file_profiles.items():
        if not isinstance(data, Mapping):
            raise InvalidProfileError(
                name, "table", f"[profiles.{name}] must be a table"
            )
        if name in profiles:
            logger.info(
                "Profile %s in %s overrides %s", name, source, profiles[name].source
            )
        profiles[name] = parse_profile_entry(name, data, source)
    return profiles
