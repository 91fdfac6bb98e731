"""Job orchestration: queues, source resolution and conversion."""

from vdc.jobs.converter import RecordSink, VideoConverter, describe_video, publish
from vdc.jobs.queue import ConversionQueue, DownloadQueue, JobQueue
from vdc.jobs.rate_limit import RateLimit, SlidingWindowCounter, StartRateLimiter
from vdc.jobs.sources import SourceResolver, classify_media_type, remote_digest

__all__ = [
    "ConversionQueue",
    "DownloadQueue",
    "JobQueue",
    "RateLimit",
    "RecordSink",
    "SlidingWindowCounter",
    "SourceResolver",
    "StartRateLimiter",
    "VideoConverter",
    "classify_media_type",
    "describe_video",
    "publish",
    "remote_digest",
]
