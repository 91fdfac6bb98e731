"""Bounded-concurrency FIFO job queues.

Jobs are coroutine factories. Workers take jobs strictly in submission
order; a failed job rejects only its own future and the queue never
retries. Cancellation of a running job is not supported.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from vdc.jobs.rate_limit import RateLimit, StartRateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")

JobFactory = Callable[[], Awaitable[T]]

CONVERSION_CONCURRENCY = 1
DOWNLOAD_CONCURRENCY = 3
DOWNLOAD_RATE_LIMIT = RateLimit(max_starts=10, window_seconds=1.0)


class JobQueue:
    """FIFO work queue with a fixed number of workers."""

    def __init__(
        self,
        concurrency: int,
        name: str = "jobs",
        rate_limit: RateLimit | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.concurrency = concurrency
        self.name = name
        self._limiter = StartRateLimiter(rate_limit) if rate_limit else None
        self._queue: asyncio.Queue[
            tuple[str, JobFactory[Any], asyncio.Future[Any]]
        ] | None = None
        self._workers: list[asyncio.Task[None]] = []
        self._active = 0

    @property
    def pending(self) -> int:
        """Jobs waiting to start."""
        return self._queue.qsize() if self._queue is not None else 0

    @property
    def active(self) -> int:
        """Jobs currently running."""
        return self._active

    def enqueue(self, job: JobFactory[T], label: str = "") -> asyncio.Future[T]:
        """Submit a job.

        Must be called from within a running event loop.

        Args:
            job: Zero-argument callable returning an awaitable.
            label: Job label for logs.

        Returns:
            Future resolved with the job's result or rejected with its error.
        """
        loop = asyncio.get_running_loop()
        if self._queue is None:
            self._queue = asyncio.Queue()
        if not self._workers:
            self._workers = [
                loop.create_task(self._worker(i), name=f"{self.name}-worker-{i}")
                for i in range(self.concurrency)
            ]
        future: asyncio.Future[T] = loop.create_future()
        self._queue.put_nowait((label, job, future))
        logger.debug(
            "Queued job %s",
            label or "<unnamed>",
            extra={"queue": self.name, "pending": self._queue.qsize()},
        )
        return future

    async def submit(self, job: JobFactory[T], label: str = "") -> T:
        """Enqueue a job and wait for its result."""
        return await self.enqueue(job, label)

    async def _worker(self, index: int) -> None:
        assert self._queue is not None
        while True:
            label, job, future = await self._queue.get()
            try:
                if future.cancelled():
                    continue
                if self._limiter is not None:
                    await self._limiter.acquire()
                self._active += 1
                try:
                    result = await job()
                except asyncio.CancelledError:
                    future.cancel()
                    raise
                except Exception as e:
                    logger.debug(
                        "Job %s failed: %s",
                        label or "<unnamed>",
                        e,
                        extra={"queue": self.name, "worker": index},
                    )
                    if not future.done():
                        future.set_exception(e)
                else:
                    if not future.done():
                        future.set_result(result)
                finally:
                    self._active -= 1
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every submitted job has finished."""
        if self._queue is not None:
            await self._queue.join()

    async def close(self) -> None:
        """Stop the workers. Jobs still queued are cancelled."""
        for worker in self._workers:
            worker.cancel()
        if self._workers:
            await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        if self._queue is not None:
            while not self._queue.empty():
                _, _, future = self._queue.get_nowait()
                future.cancel()
                self._queue.task_done()

    async def __aenter__(self) -> JobQueue:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class ConversionQueue(JobQueue):
    """Serializes transcoder invocations: one process at a time."""

    def __init__(self) -> None:
        super().__init__(CONVERSION_CONCURRENCY, name="conversion")


class DownloadQueue(JobQueue):
    """Remote downloads: three at a time, at most ten starts per second."""

    def __init__(self, rate_limit: RateLimit | None = DOWNLOAD_RATE_LIMIT) -> None:
        super().__init__(DOWNLOAD_CONCURRENCY, name="download", rate_limit=rate_limit)
