"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (VDC_*)
3. Config file (~/.vdc/config.toml)
4. Default values

Environment variables:
- VDC_CONFIG_PATH: Path to config file (overrides default location)
- VDC_ROOT_DIR: Project root; relative paths resolve against it
- VDC_CACHE_DIR: Cache directory (active/, rolling/, original/)
- VDC_CACHE_BIN_DIR: Directory of provisioned ffmpeg binaries
- VDC_DOWNLOAD_BINARIES: Use provisioned binaries when not on PATH
- VDC_FFMPEG_PATH / VDC_FFPROBE_PATH: Explicit tool paths
- VDC_PUBLIC_DIR: Directory receiving published files
- VDC_PRODUCTION: Rotate cache tiers around builds
- VDC_TRANSCODE_TIMEOUT: Seconds before an encode is killed
- VDC_GIF_POST_PROCESSOR: "module:function" run on every encoded GIF
- VDC_LOG_LEVEL / VDC_LOG_FILE / VDC_LOG_FORMAT: Logging
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from vdc.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from vdc.config.env import EnvReader
from vdc.config.models import VDCConfig
from vdc.config.profiles import load_profiles
from vdc.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".vdc"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path() -> Path:
    """Get the config file path, honoring VDC_CONFIG_PATH."""
    env_path = os.environ.get("VDC_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses the default location.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigurationError: If the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e


def get_config(
    config_path: Path | None = None,
    *,
    cli: ConfigSource | None = None,
    env_reader: EnvReader | None = None,
    cwd: Path | None = None,
) -> VDCConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides VDC_CONFIG_PATH).
        cli: Values from CLI flags (highest precedence).
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        cwd: Base for a relative root_dir (current directory by default).

    Returns:
        VDCConfig with merged configuration.

    Raises:
        ConfigurationError: If the config file or a custom profile is invalid.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path()
    file_config = load_config_file(path)

    builder = ConfigBuilder(cwd=cwd)
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    if cli is not None:
        builder.apply(cli)

    profiles = load_profiles(
        file_config.get("profiles", {}),
        path.parent / "profiles",
        source=str(path),
    )
    return builder.build(profiles)
