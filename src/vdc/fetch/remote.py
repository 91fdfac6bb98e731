"""Remote asset fetching.

Downloads run on the DownloadQueue (three at a time, rate limited) and
are retried a bounded number of times with a fixed backoff. Concurrent
requests for the same URL collapse onto one in-flight download through
a DownloadCache owned by the fetcher.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from vdc.exceptions import FetchError
from vdc.jobs.queue import DownloadQueue, JobQueue
from vdc.logging.reporter import NullReporter, Reporter

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 1.0
DEFAULT_TIMEOUT_SECONDS = 60.0
CHUNK_SIZE = 64 * 1024


class DownloadCache:
    """URL -> in-flight or completed download, for one process lifetime."""

    def __init__(self) -> None:
        self._entries: dict[str, asyncio.Future[Path]] = {}

    def get(self, url: str) -> asyncio.Future[Path] | None:
        return self._entries.get(url)

    def put(self, url: str, download: asyncio.Future[Path]) -> None:
        self._entries[url] = download

    def discard(self, url: str, download: asyncio.Future[Path] | None = None) -> None:
        """Forget a URL, optionally only if it still maps to ``download``."""
        current = self._entries.get(url)
        if current is None:
            return
        if download is None or current is download:
            del self._entries[url]

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class RemoteFetcher:
    """Downloads remote files to local paths."""

    def __init__(
        self,
        queue: JobQueue | None = None,
        cache: DownloadCache | None = None,
        client: httpx.AsyncClient | None = None,
        reporter: Reporter | None = None,
        attempts: int = DEFAULT_ATTEMPTS,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the fetcher.

        Args:
            queue: Queue downloads run on (a new DownloadQueue by default).
            cache: In-flight download cache (a new one by default).
            client: HTTP client; one is created and owned when omitted.
            reporter: Message sink.
            attempts: Total attempts per download.
            backoff_seconds: Fixed delay between attempts.
            timeout_seconds: Timeout for the owned client.
        """
        self._queue = queue or DownloadQueue()
        self.cache = cache or DownloadCache()
        self._client = client
        self._owns_client = client is None
        self._reporter = reporter or NullReporter()
        self._attempts = max(1, attempts)
        self._backoff = backoff_seconds
        self._timeout = timeout_seconds

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout, follow_redirects=True
            )
        return self._client

    async def close(self) -> None:
        """Close the owned HTTP client and the download queue workers."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
        await self._queue.close()

    async def __aenter__(self) -> RemoteFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def fetch(self, url: str, destination: Path) -> Path:
        """Download url to destination.

        Concurrent calls for the same URL share one download and all
        resolve to the same path. A failed download is forgotten so that
        a later call can try again.

        Args:
            url: Remote URL.
            destination: Local file path.

        Returns:
            Local path of the downloaded file.

        Raises:
            FetchError: If every attempt failed.
        """
        download = self.cache.get(url)
        if download is None:
            download = self._queue.enqueue(
                lambda: self._download(url, destination), label=url
            )
            self.cache.put(url, download)
        try:
            return await asyncio.shield(download)
        except Exception:
            self.cache.discard(url, download)
            raise

    async def _download(self, url: str, destination: Path) -> Path:
        last_error: Exception | None = None
        for attempt in range(1, self._attempts + 1):
            try:
                await self._stream_to_file(url, destination)
                logger.debug(
                    "Downloaded %s",
                    url,
                    extra={"destination": str(destination), "attempt": attempt},
                )
                return destination
            except (httpx.HTTPError, OSError) as e:
                last_error = e
                if attempt < self._attempts:
                    self._reporter.warn(
                        f"Download of {url} failed (attempt {attempt}/"
                        f"{self._attempts}): {e}. Retrying in {self._backoff:g}s"
                    )
                    await asyncio.sleep(self._backoff)

        message = f"Failed to download {url} after {self._attempts} attempts"
        self._reporter.error(message, last_error)
        raise FetchError(url, self._attempts, f"{message}: {last_error}") from last_error

    async def _stream_to_file(self, url: str, destination: Path) -> None:
        """Stream one response body to disk through a temp sibling file."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        temp_path = destination.with_name(f".{destination.name}.part")
        client = self._get_client()
        try:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                with open(temp_path, "wb") as f:
                    async for chunk in response.aiter_bytes(CHUNK_SIZE):
                        f.write(chunk)
            temp_path.replace(destination)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
