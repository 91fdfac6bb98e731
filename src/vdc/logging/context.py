"""Job context for structured logging.

Propagates the label and cache key of the running job through
contextvars, so log records emitted while a job runs are tagged
automatically (asyncio tasks copy the context when they are created).
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_label: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_label", default=None
)
_job_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_key", default=None
)


@contextmanager
def job_context(label: str, key: str | None = None) -> Generator[None, None, None]:
    """Context manager tagging log records with the current job.

    Args:
        label: Human-readable job label.
        key: Cache key of the job's artifact.

    Example:
        with job_context("intro (h264)", "ab12-cd34"):
            logger.info("Converting")  # tagged [intro (h264)]
    """
    label_token = _job_label.set(label)
    key_token = _job_key.set(key)
    try:
        yield
    finally:
        _job_label.reset(label_token)
        _job_key.reset(key_token)


def get_job_context() -> tuple[str | None, str | None]:
    """Get the current job context.

    Returns:
        Tuple of (label, key), either may be None.
    """
    return _job_label.get(), _job_key.get()


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds job_label and job_key attributes, plus a job_tag such as
    "[intro (h264)] " for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        label, key = get_job_context()
        record.job_label = label
        record.job_key = key
        record.job_tag = f"[{label}] " if label else ""
        return True  # Never filter out records
