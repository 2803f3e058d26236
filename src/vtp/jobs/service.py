"""Job submission and observation.

TranscodeService ties planning to the queue. Submitting a job probes the
source, resolves and validates the request, builds the ffmpeg plan, writes
the manifest files and only then queues the job, so every planning error
reaches the submitter before anything runs. After that, the job is only
visible through the status, progress and output streams.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import AsyncIterator
from pathlib import Path

from vtp.core.paths import resolve_within
from vtp.domain.models import ProbeResult, TranscodeRequest
from vtp.exceptions import DuplicateJobError, JobNotFoundError
from vtp.introspector.interface import SourceProber
from vtp.jobs.models import Job, TranscodeStatus
from vtp.jobs.queue import TranscodeQueue
from vtp.jobs.worker import TranscodeWorker
from vtp.manifest.descriptor import to_platform_descriptor
from vtp.manifest.io import write_descriptor, write_manifest
from vtp.planning.builder import TranscodePlan, build_transcode_plan
from vtp.planning.request import (
    TranscodeRequestModel,
    resolve_request,
    validate_encoders,
)
from vtp.tools.registry import CapabilityRegistry

logger = logging.getLogger(__name__)

# Finished jobs whose output can still be tailed
RECENT_JOBS_LIMIT = 16


def job_url_prefix(url_prefix: str, slug: str) -> str:
    """Public URL of a job's output directory, with a trailing slash."""
    return f"{url_prefix.rstrip('/')}/{slug}/"


class TranscodeService:
    """Plans, queues and reports on transcode jobs.

    The service owns the queue and its worker. Call start() from a running
    event loop to launch the worker task and stop() to cancel it.
    """

    def __init__(
        self,
        prober: SourceProber,
        capabilities: CapabilityRegistry,
        output_root: Path,
        *,
        ffmpeg_path: str = "ffmpeg",
        url_prefix: str | None = None,
        queue: TranscodeQueue | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            prober: Source prober, normally a CachingProber.
            capabilities: Registry of ffmpeg's encoders.
            output_root: Parent directory of per-job output directories.
            ffmpeg_path: ffmpeg executable for built commands.
            url_prefix: Public URL of output_root. When None, no
                descriptor.json is written.
            queue: Queue to use; a new one is created if omitted.
        """
        self.prober = prober
        self.capabilities = capabilities
        self.output_root = output_root
        self.ffmpeg_path = ffmpeg_path
        self.url_prefix = url_prefix
        self.queue = queue or TranscodeQueue()
        self.worker = TranscodeWorker(self.queue)
        self._recent: OrderedDict[str, Job] = OrderedDict()
        # Slugs being planned; their directories are being written
        self._pending: set[str] = set()
        self._task: asyncio.Task[None] | None = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[None]:
        """Start the worker task. Must be called with a running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.worker.run(), name="vtp-worker")
        return self._task

    async def stop(self) -> None:
        """Cancel the worker task, killing any running ffmpeg process."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Worker task cancelled")

    # =========================================================================
    # Planning and submission
    # =========================================================================

    def probe(self, source: Path) -> ProbeResult:
        return self.prober.probe(source)

    def output_dir_for(self, slug: str) -> Path:
        """Output directory of a job.

        Raises:
            InvalidPathError: If the slug is not a single safe path component.
        """
        return resolve_within(self.output_root, slug)

    def plan(
        self,
        source: Path,
        request: TranscodeRequestModel | TranscodeRequest,
        slug: str,
    ) -> TranscodePlan:
        """Plan a job and write its manifest files.

        Blocking: runs ffprobe on a cache miss and writes to disk.

        Args:
            source: Source media file.
            request: Wire request to resolve against the probe, or an
                already resolved request.
            slug: Output directory name.

        Returns:
            The built plan.

        Raises:
            SourceProbeError: If the source cannot be probed.
            PlanningError: If the request is invalid or cannot be satisfied.
            InvalidPathError: If the slug is not a safe directory name.
            OSError: If the output directory or manifests cannot be written.
        """
        output_dir = self.output_dir_for(slug)
        if isinstance(request, TranscodeRequestModel):
            request = resolve_request(request, self.prober.probe(source))
        validate_encoders(request, self.capabilities.get())

        plan = build_transcode_plan(
            source, request, output_dir, ffmpeg_path=self.ffmpeg_path
        )

        output_dir.mkdir(parents=True, exist_ok=True)
        write_manifest(plan.manifest, output_dir)
        if self.url_prefix is not None:
            descriptor = to_platform_descriptor(
                plan.manifest, job_url_prefix(self.url_prefix, slug)
            )
            write_descriptor(descriptor, output_dir)
        return plan

    async def submit(
        self,
        source: Path,
        request: TranscodeRequestModel | TranscodeRequest,
        slug: str,
    ) -> int:
        """Plan a job and append it to the queue.

        Returns:
            The job's 1-based queue position at the time of submission.

        Raises:
            DuplicateJobError: If a job with this slug is being planned, queued
                or running.
            SourceProbeError: If the source cannot be probed.
            PlanningError: If the request is invalid or cannot be satisfied.
            InvalidPathError: If the slug is not a safe directory name.
        """
        if self._is_active(slug):
            raise DuplicateJobError(slug)

        self._pending.add(slug)
        try:
            plan = await asyncio.to_thread(self.plan, source, request, slug)
            job = Job(
                slug=slug,
                source=source,
                plan=plan,
                duration=plan.manifest.duration,
            )
            self._remember(job)
            return await self.queue.put(job)
        finally:
            self._pending.discard(slug)

    def _is_active(self, slug: str) -> bool:
        if slug in self._pending:
            return True
        current = self.worker.current_job
        if current is not None and current.slug == slug:
            return True
        return self.queue.find(slug) is not None

    def _remember(self, job: Job) -> None:
        self._recent.pop(job.slug, None)
        self._recent[job.slug] = job
        while len(self._recent) > RECENT_JOBS_LIMIT:
            self._recent.popitem(last=False)

    # =========================================================================
    # Observation
    # =========================================================================

    async def list_queue(self) -> list[str]:
        """Slugs of queued jobs in run order, excluding the running job."""
        return await self.queue.slugs()

    @property
    def status(self) -> TranscodeStatus:
        return self.worker.status.value

    def subscribe_status(self) -> AsyncIterator[TranscodeStatus]:
        """Current worker status, then every change."""
        return self.worker.status.subscribe()

    def subscribe_progress(self) -> AsyncIterator[float]:
        """Elapsed output seconds of the running job, latest value first."""
        return self.worker.progress.subscribe()

    def get_job(self, slug: str) -> Job:
        """Find a queued, running or recently finished job.

        Raises:
            JobNotFoundError: If no such job is known.
        """
        current = self.worker.current_job
        if current is not None and current.slug == slug:
            return current
        job = self.queue.find(slug) or self._recent.get(slug)
        if job is None:
            raise JobNotFoundError(slug)
        return job

    def tail_output(self, slug: str) -> AsyncIterator[str]:
        """Replay a job's ffmpeg output from the start and follow it.

        The stream ends when the job finishes. A queued job's stream waits
        until the job starts.

        Raises:
            JobNotFoundError: If no such job is known.
        """
        return self.get_job(slug).output.follow()
