"""Conversion orchestration.

For each request: derive the cache key, restore from the tiered cache
(promoting from the rolling tier when needed), and only on a miss probe
the source, build the encode spec and run the transcoder on the
conversion queue. The active artifact is then published to the public
directory.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from vdc.cache.keys import derive_key
from vdc.cache.tiers import TieredCacheStore
from vdc.domain.enums import ArtifactKind
from vdc.domain.models import (
    ConversionJob,
    ConversionResult,
    ScreenshotJob,
    ScreenshotResult,
    SourceAsset,
    StreamMetadata,
    VideoDescription,
)
from vdc.executor.screenshots import ScreenshotExtractor
from vdc.executor.transcode import TranscodeExecutor
from vdc.filters import build_filters
from vdc.introspector.interface import Prober, require_video_stream
from vdc.jobs.queue import ConversionQueue, JobQueue
from vdc.logging.context import job_context
from vdc.logging.reporter import NullReporter, Reporter
from vdc.options import (
    ScreenshotOptions,
    VideoOptions,
    build_options,
    build_screenshot_options,
)
from vdc.profiles import ProfileRegistry, apply_option_inputs

logger = logging.getLogger(__name__)

SCREENSHOTS_PROFILE = "screenshots"

RecordSink = Callable[[Path, str], Any]
"""Registers an extracted frame (path, parent asset id) with the host."""


def publish(artifact: Path, public_path: Path) -> bool:
    """Copy an artifact to its public location.

    The copy is made when the public file is missing or its size differs
    from the artifact.

    Returns:
        True if a copy was made.
    """
    if public_path.exists() and public_path.stat().st_size == artifact.stat().st_size:
        return False
    public_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(artifact, public_path)
    return True


def _frame_sort_key(path: Path) -> tuple[float, str]:
    stem = path.stem.removesuffix("s")
    try:
        return (float(stem), path.name)
    except ValueError:
        return (float("inf"), path.name)


def list_frames(directory: Path) -> tuple[Path, ...]:
    """Frames of a screenshot artifact, in timestamp order."""
    return tuple(sorted(directory.glob("*.jpg"), key=_frame_sort_key))


class VideoConverter:
    """Runs conversion and screenshot jobs against the tiered cache."""

    def __init__(
        self,
        *,
        store: TieredCacheStore,
        registry: ProfileRegistry,
        prober: Prober,
        transcoder: TranscodeExecutor,
        screenshotter: ScreenshotExtractor,
        public_dir: Path,
        root_dir: Path,
        queue: JobQueue | None = None,
        reporter: Reporter | None = None,
        record_sink: RecordSink | None = None,
    ) -> None:
        self.store = store
        self.registry = registry
        self.prober = prober
        self.transcoder = transcoder
        self.screenshotter = screenshotter
        self.public_dir = public_dir
        self.root_dir = root_dir
        self.queue = queue or ConversionQueue()
        self.record_sink = record_sink
        self._reporter = reporter or NullReporter()

    async def close(self) -> None:
        await self.queue.close()

    def prepare(
        self,
        source: SourceAsset,
        profile_name: str,
        options: VideoOptions | Mapping[str, Any] | None = None,
    ) -> ConversionJob:
        """Validate options and build the job for one conversion.

        Raises:
            UnknownProfileError: If the profile does not exist.
            InvalidOptionsError: If the options do not validate.
        """
        profile = self.registry.get(profile_name)
        if not isinstance(options, VideoOptions):
            options = build_options(profile.variant, options, profile.name)
        key = derive_key(source.digest, options, profile=profile.name)
        public_path = (
            self.public_dir
            / options.public_path
            / f"{source.name}-{key}.{profile.extension}"
        )
        return ConversionJob(
            source=source,
            profile_name=profile.name,
            options=options,
            cache_key=key,
            extension=profile.extension,
            public_path=public_path,
        )

    async def convert(
        self,
        source: SourceAsset,
        profile_name: str,
        options: VideoOptions | Mapping[str, Any] | None = None,
    ) -> ConversionResult:
        """Convert a source with a profile, reusing cached artifacts.

        Raises:
            ConfigurationError: For unknown profiles or invalid options.
            TranscodeError: If the transcoder fails.
            MediaIntrospectionError: If the source cannot be probed or has
                no usable video stream.
        """
        return await self.run_job(self.prepare(source, profile_name, options))

    async def run_job(self, job: ConversionJob) -> ConversionResult:
        with job_context(job.label, str(job.cache_key)):
            outcome = await self.store.restore(
                ArtifactKind.VIDEOS, job.artifact_name, job.label
            )
            if outcome.hit:
                cache_path = self.store.active_path(
                    ArtifactKind.VIDEOS, job.artifact_name
                )
            else:
                cache_path = await self.queue.submit(
                    lambda: self._encode(job), label=job.label
                )

            if await asyncio.to_thread(publish, cache_path, job.public_path):
                logger.debug("Published %s", job.public_path)

        return ConversionResult(
            cache_key=job.cache_key,
            cache_path=cache_path,
            public_path=job.public_path,
            from_cache=outcome.hit,
        )

    async def _encode(self, job: ConversionJob) -> Path:
        with job_context(job.label, str(job.cache_key)):
            # An identical job queued earlier may have produced it meanwhile
            outcome = await self.store.restore(
                ArtifactKind.VIDEOS, job.artifact_name, job.label
            )
            if outcome.hit:
                return self.store.active_path(ArtifactKind.VIDEOS, job.artifact_name)

            profile = self.registry.get(job.profile_name)
            metadata = await asyncio.to_thread(self.prober.probe, job.source.path)
            require_video_stream(metadata, job.source.path)
            filters = build_filters(job.options, metadata)
            spec = profile.build(filters, job.options, metadata)
            spec = apply_option_inputs(spec, job.options, self.root_dir)

            self._reporter.info(f"{job.label} - Converting")
            staged = self.store.staging_path(job.artifact_name)
            try:
                await self.transcoder.run_async(
                    spec,
                    job.source.path,
                    staged,
                    label=job.label,
                    duration_seconds=job.options.duration or metadata.source_duration,
                )
                if profile.post_process is not None:
                    self._reporter.verbose(f"{job.label} - Post-processing")
                    await asyncio.to_thread(profile.post_process, staged)
                return await self.store.commit(
                    ArtifactKind.VIDEOS, job.artifact_name, staged
                )
            except BaseException:
                self.store.discard(staged)
                raise

    async def take_screenshots(
        self,
        source: SourceAsset,
        options: ScreenshotOptions | Mapping[str, Any] | None = None,
    ) -> ScreenshotResult:
        """Extract still frames, reusing a cached screenshot directory.

        Raises:
            InvalidOptionsError: If the options do not validate.
            TranscodeError: If a frame cannot be extracted.
        """
        if not isinstance(options, ScreenshotOptions):
            options = build_screenshot_options(options)
        key = derive_key(source.digest, options, profile=SCREENSHOTS_PROFILE)
        job = ScreenshotJob(source=source, options=options, cache_key=key)

        with job_context(job.label, str(key)):
            outcome = await self.store.restore(
                ArtifactKind.SCREENSHOTS, job.artifact_name, job.label
            )
            if outcome.hit:
                directory = self.store.active_path(
                    ArtifactKind.SCREENSHOTS, job.artifact_name
                )
            else:
                directory = await self.queue.submit(
                    lambda: self._extract(job), label=job.label
                )

        paths = list_frames(directory)
        records: tuple[Any, ...] = ()
        if self.record_sink is not None:
            records = tuple(self.record_sink(path, source.asset_id) for path in paths)
        return ScreenshotResult(
            cache_key=key, paths=paths, from_cache=outcome.hit, records=records
        )

    async def _extract(self, job: ScreenshotJob) -> Path:
        with job_context(job.label, str(job.cache_key)):
            outcome = await self.store.restore(
                ArtifactKind.SCREENSHOTS, job.artifact_name, job.label
            )
            if outcome.hit:
                return self.store.active_path(
                    ArtifactKind.SCREENSHOTS, job.artifact_name
                )

            duration = None
            if any(ts.endswith("%") for ts in job.options.timestamps):
                metadata = await asyncio.to_thread(self.prober.probe, job.source.path)
                duration = metadata.source_duration

            staged = self.store.staging_path(job.artifact_name)
            try:
                await self.screenshotter.extract_async(
                    job.source.path,
                    job.options.timestamps,
                    job.options.width,
                    staged,
                    label=job.label,
                    duration=duration,
                )
                return await self.store.commit(
                    ArtifactKind.SCREENSHOTS, job.artifact_name, staged
                )
            except BaseException:
                self.store.discard(staged)
                raise

    async def describe(self, public_path: Path) -> VideoDescription:
        """Probe a published video and describe it."""
        metadata = await asyncio.to_thread(self.prober.probe, public_path)
        return describe_video(public_path, self.public_dir, metadata)


def describe_video(
    public_path: Path, public_dir: Path, metadata: StreamMetadata
) -> VideoDescription:
    """Build the VideoDescription of a published file."""
    try:
        relative = public_path.relative_to(public_dir).as_posix()
    except ValueError:
        relative = public_path.name
    width = metadata.width
    height = metadata.height
    aspect_ratio = width / height if width and height else None
    return VideoDescription(
        path=f"/{relative}",
        absolute_path=public_path.resolve(),
        name=public_path.stem,
        ext=public_path.suffix,
        format_name=metadata.format_name,
        format_long_name=metadata.format_long_name,
        start_time=metadata.start_time,
        duration=metadata.duration,
        size=metadata.size,
        bit_rate=metadata.bit_rate,
        width=width,
        height=height,
        aspect_ratio=aspect_ratio,
    )
