"""Wires configuration into the conversion pipeline for one CLI run."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

from vdc.cache import TieredCacheStore
from vdc.config import VDCConfig
from vdc.domain import LocalAsset, RemoteAsset
from vdc.executor import ScreenshotExtractor, TranscodeExecutor
from vdc.fetch import RemoteFetcher
from vdc.introspector import FFprobeProber
from vdc.jobs import SourceResolver, VideoConverter
from vdc.logging import Reporter
from vdc.profiles import ProfileRegistry
from vdc.tools import resolve_tools


@dataclass
class Runtime:
    """Components shared by the commands of one run."""

    config: VDCConfig
    store: TieredCacheStore
    registry: ProfileRegistry
    resolver: SourceResolver
    converter: VideoConverter
    prober: FFprobeProber


def asset_from_argument(source: str, media_type: str | None = None) -> LocalAsset | RemoteAsset:
    """Build an asset from a CLI argument: an http(s) URL or a local path."""
    parsed = urlparse(source)
    if parsed.scheme in ("http", "https"):
        file_name = Path(unquote(parsed.path)).name or "download"
        return RemoteAsset(
            asset_id=source,
            remote_id=source,
            url=source,
            file_name=file_name,
            content_type=media_type,
        )
    path = Path(source)
    return LocalAsset(asset_id=str(path), path=path, media_type=media_type)


@asynccontextmanager
async def open_runtime(config: VDCConfig, reporter: Reporter) -> AsyncIterator[Runtime]:
    """Build the pipeline and close its queues and HTTP client afterwards.

    Raises:
        ToolNotFoundError: If ffmpeg or ffprobe cannot be located.
        InvalidProfileError: If a custom profile is incomplete.
    """
    tools = resolve_tools(
        config.ffmpeg_path,
        config.ffprobe_path,
        config.cache_bin_dir,
        config.download_binaries,
    )
    registry = ProfileRegistry(config.profiles)
    if config.gif_post_processor is not None:
        registry.set_post_processor("gif", config.gif_post_processor)
    store = TieredCacheStore(config.cache_dir, reporter)
    prober = FFprobeProber(tools.ffprobe)
    fetcher = RemoteFetcher(reporter=reporter)
    converter = VideoConverter(
        store=store,
        registry=registry,
        prober=prober,
        transcoder=TranscodeExecutor(
            tools.ffmpeg, reporter, timeout=config.transcode_timeout
        ),
        screenshotter=ScreenshotExtractor(tools.ffmpeg, reporter),
        public_dir=config.public_dir,
        root_dir=config.root_dir,
        reporter=reporter,
    )
    try:
        yield Runtime(
            config=config,
            store=store,
            registry=registry,
            resolver=SourceResolver(config.original_dir, fetcher),
            converter=converter,
            prober=prober,
        )
    finally:
        await converter.close()
        await fetcher.close()
