"""Structured logging module for the Video Delivery Converter.

Provides configurable logging with JSON format support and file rotation,
job context tagging, and the four-level Reporter contract the conversion
core reports through.
"""

from vdc.logging.config import configure_logging
from vdc.logging.context import (
    JobContextFilter,
    get_job_context,
    job_context,
)
from vdc.logging.handlers import JSONFormatter
from vdc.logging.reporter import LoggingReporter, NullReporter, Reporter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "LoggingReporter",
    "NullReporter",
    "Reporter",
    "configure_logging",
    "get_job_context",
    "job_context",
]
