"""Configuration data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vdc.profiles.base import PostProcessor, ProfileConfig


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    file: Path | None = None
    format: str = "text"
    max_bytes: int = 10_485_760
    backup_count: int = 5

    def __post_init__(self) -> None:
        if self.level.lower() not in ("debug", "info", "warning", "error"):
            raise ValueError(f"Invalid log level: {self.level}")
        if self.format not in ("text", "json"):
            raise ValueError(f"Invalid log format: {self.format}")


@dataclass(frozen=True)
class VDCConfig:
    """Resolved configuration."""

    cache_dir: Path
    cache_bin_dir: Path
    public_dir: Path
    root_dir: Path
    download_binaries: bool = False
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None
    production: bool = False
    transcode_timeout: int | None = None
    gif_post_processor: PostProcessor | None = None
    profiles: dict[str, ProfileConfig] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def original_dir(self) -> Path:
        """Downloaded source assets, keyed by digest."""
        return self.cache_dir / "original"
