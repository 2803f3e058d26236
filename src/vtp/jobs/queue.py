"""In-memory FIFO job queue.

Jobs run strictly in submission order. There is no priority and no way to
reorder or remove a queued job. The queue lives in the server process, so
queued jobs are lost on restart.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque

from vtp.jobs.models import Job

logger = logging.getLogger(__name__)


class TranscodeQueue:
    """FIFO of pending jobs shared by submitters and the single worker."""

    def __init__(self) -> None:
        self._jobs: deque[Job] = deque()
        self._available = asyncio.Condition()

    def __len__(self) -> int:
        return len(self._jobs)

    async def put(self, job: Job) -> int:
        """Append a job and wake the worker.

        Returns:
            The job's 1-based position at the time of submission.
        """
        async with self._available:
            self._jobs.append(job)
            position = len(self._jobs)
            self._available.notify()
        logger.info("Queued job %s at position %d", job.slug, position)
        return position

    async def pop(self) -> Job | None:
        """Remove and return the front job, or None if the queue is empty."""
        async with self._available:
            return self._jobs.popleft() if self._jobs else None

    async def get(self) -> Job:
        """Remove and return the front job, waiting until one is queued."""
        async with self._available:
            await self._available.wait_for(lambda: bool(self._jobs))
            return self._jobs.popleft()

    async def slugs(self) -> list[str]:
        """Slugs of the queued jobs, front first. Excludes the running job."""
        async with self._available:
            return [job.slug for job in self._jobs]

    def find(self, slug: str) -> Job | None:
        return next((job for job in self._jobs if job.slug == slug), None)
