"""Two-tier on-disk artifact cache.

Layout under the cache directory::

    active/videos/<cacheKey>.<ext>
    active/screenshots/<cacheKey>/<frame>.jpg
    rolling/...             previous build, same layout
    original/<digest><ext>  downloaded sources
    .staging/               in-progress artifacts, never served

TieredCacheStore is the only component that mutates the tier
directories. Every mutation is serialized through one asyncio.Lock and
executed in a worker thread so the event loop is never blocked on disk.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import shutil
from dataclasses import dataclass
from pathlib import Path

from vdc.domain.enums import ArtifactKind, CacheState, CacheTier, RestoreOutcome
from vdc.logging.reporter import NullReporter, Reporter

logger = logging.getLogger(__name__)

STAGING_DIR_NAME = ".staging"
ORIGINAL_DIR_NAME = "original"


@dataclass(frozen=True)
class TierStatus:
    """Snapshot of one tier for display."""

    tier: CacheTier
    path: Path
    exists: bool
    videos: int = 0
    screenshots: int = 0


def _remove(path: Path) -> None:
    """Delete a file or directory tree if it exists."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def _move(source: Path, destination: Path) -> None:
    """Move a file or directory onto destination, replacing it.

    Source and destination live under the same cache directory, so the
    final rename is atomic on POSIX.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    if destination.is_dir() and not destination.is_symlink():
        shutil.rmtree(destination)
    source.replace(destination)


class TieredCacheStore:
    """Active/rolling artifact cache with promotion and rotation."""

    def __init__(self, cache_dir: Path, reporter: Reporter | None = None) -> None:
        self.cache_dir = cache_dir
        self.active_dir = cache_dir / CacheTier.ACTIVE.value
        self.rolling_dir = cache_dir / CacheTier.ROLLING.value
        self.staging_dir = cache_dir / STAGING_DIR_NAME
        self.original_dir = cache_dir / ORIGINAL_DIR_NAME
        self._reporter = reporter or NullReporter()
        self._lock = asyncio.Lock()

    def tier_dir(self, tier: CacheTier) -> Path:
        return self.active_dir if tier is CacheTier.ACTIVE else self.rolling_dir

    def artifact_path(self, tier: CacheTier, kind: ArtifactKind, name: str) -> Path:
        """Path of an artifact inside a tier (it may not exist)."""
        return self.tier_dir(tier) / kind.value / name

    def active_path(self, kind: ArtifactKind, name: str) -> Path:
        return self.artifact_path(CacheTier.ACTIVE, kind, name)

    def rolling_path(self, kind: ArtifactKind, name: str) -> Path:
        return self.artifact_path(CacheTier.ROLLING, kind, name)

    def state(self, kind: ArtifactKind, name: str) -> CacheState:
        """Where the artifact currently lives."""
        if self.active_path(kind, name).exists():
            return CacheState.IN_ACTIVE
        if self.rolling_path(kind, name).exists():
            return CacheState.IN_ROLLING_ONLY
        return CacheState.ABSENT

    def staging_path(self, name: str) -> Path:
        """Reserve a unique staging location for an artifact being built.

        The returned path keeps ``name`` as its suffix so tools that infer
        the container from the extension still work. Nothing is created.
        """
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        return self.staging_dir / f"{secrets.token_hex(4)}-{name}"

    def discard(self, path: Path) -> None:
        """Remove a staged artifact after a failed build.

        Cleanup errors are logged, never raised, so they cannot mask the
        failure that caused the discard.
        """
        try:
            _remove(path)
        except OSError as e:
            logger.warning("Failed to discard staged artifact %s: %s", path, e)

    async def restore(
        self, kind: ArtifactKind, name: str, label: str | None = None
    ) -> RestoreOutcome:
        """Make an artifact available in the active tier if it is cached.

        A rolling-only artifact is moved (not copied) into the active tier.

        Args:
            kind: Artifact kind.
            name: Artifact file or directory name.
            label: Job label for messages.

        Returns:
            ACTIVE_HIT, PROMOTED or MISS.
        """
        async with self._lock:
            outcome = await asyncio.to_thread(self._restore, kind, name)
        label = label or name
        if outcome is RestoreOutcome.ACTIVE_HIT:
            self._reporter.verbose(f"{label} - Found in cache")
        elif outcome is RestoreOutcome.PROMOTED:
            self._reporter.verbose(f"{label} - Restored from previous build cache")
        return outcome

    def _restore(self, kind: ArtifactKind, name: str) -> RestoreOutcome:
        active = self.active_path(kind, name)
        if active.exists():
            return RestoreOutcome.ACTIVE_HIT
        rolling = self.rolling_path(kind, name)
        if rolling.exists():
            _move(rolling, active)
            logger.debug(
                "Promoted artifact from rolling tier",
                extra={"artifact": name, "kind": kind.value},
            )
            return RestoreOutcome.PROMOTED
        return RestoreOutcome.MISS

    async def commit(self, kind: ArtifactKind, name: str, artifact: Path) -> Path:
        """Move a finished artifact into the active tier.

        Args:
            kind: Artifact kind.
            name: Artifact file or directory name.
            artifact: Staged file or directory to commit.

        Returns:
            Path of the committed artifact.
        """
        destination = self.active_path(kind, name)
        async with self._lock:
            await asyncio.to_thread(_move, artifact, destination)
        logger.debug(
            "Committed artifact to active tier",
            extra={"artifact": name, "kind": kind.value},
        )
        return destination

    async def rotate(self) -> None:
        """Turn the active tier into the rolling tier for the next build.

        A rolling tier left from two builds ago is stale and deleted first.
        """
        async with self._lock:
            await asyncio.to_thread(self._rotate)

    def _rotate(self) -> None:
        if self.rolling_dir.exists():
            self._reporter.verbose("Removing stale rolling cache")
            shutil.rmtree(self.rolling_dir)
        if self.active_dir.exists():
            self._reporter.verbose("Moving active cache to rolling cache")
            self.active_dir.replace(self.rolling_dir)
        # Staged leftovers from a crashed build are never valid artifacts
        if self.staging_dir.exists():
            shutil.rmtree(self.staging_dir, ignore_errors=True)

    async def reconcile(self) -> None:
        """Settle the tiers after a build.

        Only rolling present means the build produced nothing usable, so
        rolling is promoted back to active. Both present means rolling is
        a leftover and is deleted.
        """
        async with self._lock:
            await asyncio.to_thread(self._reconcile)

    def _reconcile(self) -> None:
        active = self.active_dir.exists()
        rolling = self.rolling_dir.exists()
        if rolling and not active:
            self._reporter.info("No active cache after build, restoring rolling cache")
            self.rolling_dir.replace(self.active_dir)
        elif rolling and active:
            self._reporter.verbose("Removing rolling cache")
            shutil.rmtree(self.rolling_dir)

    def status(self) -> list[TierStatus]:
        """Describe both tiers."""
        statuses = []
        for tier in (CacheTier.ACTIVE, CacheTier.ROLLING):
            root = self.tier_dir(tier)
            if not root.exists():
                statuses.append(TierStatus(tier=tier, path=root, exists=False))
                continue
            counts = {}
            for kind in ArtifactKind:
                kind_dir = root / kind.value
                counts[kind] = (
                    sum(1 for _ in kind_dir.iterdir()) if kind_dir.is_dir() else 0
                )
            statuses.append(
                TierStatus(
                    tier=tier,
                    path=root,
                    exists=True,
                    videos=counts[ArtifactKind.VIDEOS],
                    screenshots=counts[ArtifactKind.SCREENSHOTS],
                )
            )
        return statuses
