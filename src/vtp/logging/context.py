"""Job context for structured logging.

The worker runs each job inside job_context(slug) so every record logged
while the job runs, from any module, carries the job's slug.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_slug: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_slug", default=None
)


def get_job_slug() -> str | None:
    return _job_slug.get()


@contextmanager
def job_context(slug: str) -> Generator[None, None, None]:
    """Tag log records emitted inside the block with a job slug.

    Restores the previous slug on exit, so contexts may nest.

    Example:
        with job_context("my-movie"):
            logger.info("Starting ffmpeg")  # logged as [my-movie] ...
    """
    token = _job_slug.set(slug)
    try:
        yield
    finally:
        _job_slug.reset(token)


class JobContextFilter(logging.Filter):
    """Logging filter that injects the current job slug into log records.

    Adds job_slug for JSON output and job_tag ("[slug] " or "") for the
    text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        slug = _job_slug.get()
        record.job_slug = slug
        record.job_tag = f"[{slug}] " if slug else ""
        return True  # Never filter out records
