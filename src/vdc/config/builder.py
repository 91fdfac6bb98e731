"""Configuration builder with explicit layering.

ConfigBuilder composes VDCConfig from several ConfigSources; later
sources override earlier ones for every value they specify.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from vdc.config.env import EnvReader
from vdc.config.models import LoggingConfig, VDCConfig
from vdc.config.profiles import import_converter
from vdc.exceptions import ConfigurationError
from vdc.profiles.base import ProfileConfig

DEFAULT_CACHE_DIR_NAME = ".cache/vdc"
DEFAULT_BIN_DIR_NAME = ".cache-video-bin"
DEFAULT_PUBLIC_DIR_NAME = "public"


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    root_dir: Path | None = None
    cache_dir: Path | None = None
    cache_bin_dir: Path | None = None
    public_dir: Path | None = None
    download_binaries: bool | None = None
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None
    production: bool | None = None
    transcode_timeout: int | None = None
    gif_post_processor: str | None = None

    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds VDCConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build(profiles)
    """

    def __init__(self, cwd: Path | None = None) -> None:
        self._values: dict[str, Any] = {}
        self._cwd = cwd or Path.cwd()

    def apply(self, source: ConfigSource) -> None:
        """Apply a source; its non-None values override existing ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def _path(self, key: str, base: Path, default_name: str) -> Path:
        """Resolve a configured path against ``base``."""
        value = self._values.get(key)
        if value is None:
            return (base / default_name).resolve()
        return (base / value).resolve() if not value.is_absolute() else value

    def build(self, profiles: dict[str, ProfileConfig] | None = None) -> VDCConfig:
        """Build the final VDCConfig with defaults for unset values."""
        root_dir = (self._cwd / self._get("root_dir", self._cwd)).resolve()

        try:
            logging_config = LoggingConfig(
                level=self._get("logging_level", "info"),
                file=self._get("logging_file", None),
                format=self._get("logging_format", "text"),
                max_bytes=self._get("logging_max_bytes", 10_485_760),
                backup_count=self._get("logging_backup_count", 5),
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        timeout = self._get("transcode_timeout", None)
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(
                "transcode_timeout must be a positive number of seconds, "
                f"got {timeout}"
            )
        post_processor = self._get("gif_post_processor", None)

        return VDCConfig(
            root_dir=root_dir,
            cache_dir=self._path("cache_dir", root_dir, DEFAULT_CACHE_DIR_NAME),
            cache_bin_dir=self._path("cache_bin_dir", root_dir, DEFAULT_BIN_DIR_NAME),
            public_dir=self._path("public_dir", root_dir, DEFAULT_PUBLIC_DIR_NAME),
            download_binaries=self._get("download_binaries", False),
            ffmpeg_path=self._get("ffmpeg_path", None),
            ffprobe_path=self._get("ffprobe_path", None),
            production=self._get("production", False),
            transcode_timeout=timeout,
            gif_post_processor=(
                import_converter("gif", post_processor, "post_processor")
                if post_processor
                else None
            ),
            profiles=dict(profiles or {}),
            logging=logging_config,
        )


def _optional_path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Recognized layout::

        root_dir = "."
        production = false

        [cache]
        dir = ".cache/vdc"
        bin_dir = ".cache-video-bin"
        download_binaries = true

        [tools]
        ffmpeg = "/usr/bin/ffmpeg"
        ffprobe = "/usr/bin/ffprobe"
        transcode_timeout = 600

        [output]
        public_dir = "public"
        gif_post_processor = "mysite.media:optimise_gif"

        [logging]
        level = "info"
        format = "text"
    """
    cache = file_config.get("cache", {})
    tools = file_config.get("tools", {})
    output = file_config.get("output", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        root_dir=_optional_path(file_config.get("root_dir")),
        production=file_config.get("production"),
        cache_dir=_optional_path(cache.get("dir")),
        cache_bin_dir=_optional_path(cache.get("bin_dir")),
        download_binaries=cache.get("download_binaries"),
        ffmpeg_path=_optional_path(tools.get("ffmpeg")),
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        transcode_timeout=tools.get("transcode_timeout"),
        public_dir=_optional_path(output.get("public_dir")),
        gif_post_processor=output.get("gif_post_processor"),
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from VDC_* environment variables."""
    return ConfigSource(
        root_dir=reader.get_path("VDC_ROOT_DIR"),
        cache_dir=reader.get_path("VDC_CACHE_DIR"),
        cache_bin_dir=reader.get_path("VDC_CACHE_BIN_DIR"),
        public_dir=reader.get_path("VDC_PUBLIC_DIR"),
        download_binaries=reader.get_bool("VDC_DOWNLOAD_BINARIES"),
        ffmpeg_path=reader.get_path("VDC_FFMPEG_PATH"),
        ffprobe_path=reader.get_path("VDC_FFPROBE_PATH"),
        production=reader.get_bool("VDC_PRODUCTION"),
        transcode_timeout=reader.get_int("VDC_TRANSCODE_TIMEOUT"),
        gif_post_processor=reader.get_str("VDC_GIF_POST_PROCESSOR"),
        logging_level=reader.get_str("VDC_LOG_LEVEL"),
        logging_file=reader.get_path("VDC_LOG_FILE"),
        logging_format=reader.get_str("VDC_LOG_FORMAT"),
    )
