"""Structured logging for vtp.

Provides configurable logging with JSON format support and file rotation,
plus a job context that tags records with the running job's slug.
"""

from vtp.logging.config import configure_logging
from vtp.logging.context import JobContextFilter, get_job_slug, job_context
from vtp.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "configure_logging",
    "get_job_slug",
    "job_context",
]
