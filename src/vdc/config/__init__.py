"""Configuration: models, layered loading and custom profiles."""

from vdc.config.builder import ConfigBuilder, ConfigSource
from vdc.config.env import EnvReader
from vdc.config.loader import get_config, get_default_config_path, load_config_file
from vdc.config.models import LoggingConfig, VDCConfig
from vdc.config.profiles import import_converter, load_profile_file, load_profiles

__all__ = [
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "LoggingConfig",
    "VDCConfig",
    "get_config",
    "get_default_config_path",
    "import_converter",
    "load_config_file",
    "load_profile_file",
    "load_profiles",
]
