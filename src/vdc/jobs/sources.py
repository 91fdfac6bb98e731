"""Resolve local and remote assets into SourceAssets.

Assets that are not videos resolve to a SkippedAsset value instead of
raising, so callers can produce an empty result for them.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import os
from pathlib import Path
from typing import TYPE_CHECKING

from vdc.core.digest import content_digest, file_digest
from vdc.domain.enums import AssetOrigin
from vdc.domain.models import LocalAsset, RemoteAsset, SkippedAsset, SourceAsset
from vdc.exceptions import ConfigurationError, MissingFileTypeError, SourceIdentityError

if TYPE_CHECKING:
    from vdc.fetch.remote import RemoteFetcher

logger = logging.getLogger(__name__)

VIDEO_MEDIA_PREFIX = "video/"


def classify_media_type(
    asset_id: str, media_type: str | None, file_name: str
) -> str | SkippedAsset:
    """Determine the media type of an asset.

    Returns:
        The media type for videos, or a SkippedAsset for anything else.

    Raises:
        MissingFileTypeError: If no media type is known or guessable.
    """
    resolved = media_type or mimetypes.guess_type(file_name)[0]
    if not resolved:
        raise MissingFileTypeError(asset_id)
    if not resolved.startswith(VIDEO_MEDIA_PREFIX):
        return SkippedAsset(
            asset_id=asset_id,
            media_type=resolved,
            reason=f"{resolved} is not a video",
        )
    return resolved


def remote_digest(asset: RemoteAsset) -> str:
    """Digest identifying a remote asset without downloading it."""
    return content_digest([asset.remote_id, asset.url, asset.size])


class SourceResolver:
    """Turns LocalAsset/RemoteAsset into SourceAsset."""

    def __init__(self, original_dir: Path, fetcher: RemoteFetcher | None = None) -> None:
        """Initialize the resolver.

        Args:
            original_dir: Directory holding downloaded sources by digest.
            fetcher: Remote fetcher; required only for remote assets.
        """
        self.original_dir = original_dir
        self._fetcher = fetcher

    async def resolve(
        self, asset: LocalAsset | RemoteAsset
    ) -> SourceAsset | SkippedAsset:
        """Resolve an asset.

        Raises:
            MissingFileTypeError: If the media type is unknown.
            SourceIdentityError: If a local file cannot be read.
            FetchError: If a remote download fails.
        """
        if isinstance(asset, RemoteAsset):
            return await self._resolve_remote(asset)
        return await self._resolve_local(asset)

    async def _resolve_local(self, asset: LocalAsset) -> SourceAsset | SkippedAsset:
        media_type = classify_media_type(
            asset.asset_id, asset.media_type, asset.path.name
        )
        if isinstance(media_type, SkippedAsset):
            return media_type

        digest = asset.content_digest
        if not digest:
            try:
                digest = await asyncio.to_thread(file_digest, asset.path)
            except OSError as e:
                raise SourceIdentityError(
                    f"Cannot read {asset.path} to compute its digest: {e}"
                ) from e

        return SourceAsset(
            asset_id=asset.asset_id,
            digest=digest,
            path=asset.path.resolve(),
            media_type=media_type,
            name=asset.path.stem,
            origin=AssetOrigin.LOCAL,
        )

    async def _resolve_remote(self, asset: RemoteAsset) -> SourceAsset | SkippedAsset:
        media_type = classify_media_type(
            asset.asset_id, asset.content_type, asset.file_name
        )
        if isinstance(media_type, SkippedAsset):
            return media_type

        digest = remote_digest(asset)
        file_name = Path(asset.file_name)
        destination = self.original_dir / f"{digest}{file_name.suffix}"

        if destination.is_file() and os.access(destination, os.R_OK):
            logger.debug("Remote source already downloaded: %s", destination)
        else:
            if self._fetcher is None:
                raise ConfigurationError(
                    f"Asset {asset.asset_id} is remote but no fetcher is configured"
                )
            destination = await self._fetcher.fetch(asset.url, destination)

        return SourceAsset(
            asset_id=asset.asset_id,
            digest=digest,
            path=destination,
            media_type=media_type,
            name=file_name.stem,
            origin=AssetOrigin.REMOTE,
        )
