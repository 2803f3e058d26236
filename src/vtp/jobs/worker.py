"""The transcode worker.

A single worker task runs queued jobs one at a time. Transcoding is CPU or
GPU bound and running two at once only makes both slower, so there is
exactly one ffmpeg process active at any moment.

While ffmpeg runs, its stderr is read in carriage-return delimited chunks.
Complete log lines go to the job's output log; the trailing status line is
parsed for the elapsed output time, which is published as progress. A job
whose process fails is logged and abandoned; the worker moves on to the
next job.
"""

from __future__ import annotations

import asyncio
import codecs
import logging

from vtp.core.subprocess_utils import format_command
from vtp.exceptions import TranscodeProcessError
from vtp.jobs.models import Job, TranscodeStatus
from vtp.jobs.queue import TranscodeQueue
from vtp.jobs.status import LatestValue
from vtp.logging import job_context
from vtp.tools.ffmpeg_progress import parse_elapsed_seconds, split_status_chunk

logger = logging.getLogger(__name__)

STATUS_DELIMITER = b"\r"


class TranscodeWorker:
    """Runs jobs from a TranscodeQueue and reports on them.

    Attributes:
        status: Idle, or Working with the running job.
        progress: Elapsed output seconds of the running job. Reset to 0.0
            when a job starts.
    """

    def __init__(self, queue: TranscodeQueue) -> None:
        self._queue = queue
        self.status: LatestValue[TranscodeStatus] = LatestValue(TranscodeStatus.idle())
        self.progress: LatestValue[float] = LatestValue(0.0)

    @property
    def current_job(self) -> Job | None:
        return self.status.value.job

    async def run(self) -> None:
        """Process jobs forever. Cancel the task to stop."""
        logger.info("Transcode worker started")
        try:
            while True:
                job = await self._queue.pop()
                if job is None:
                    if not self.status.value.is_idle:
                        self.status.publish(TranscodeStatus.idle())
                    job = await self._queue.get()
                try:
                    await self.run_job(job)
                except Exception:
                    logger.exception("Transcode %s failed unexpectedly", job.slug)
        finally:
            if not self.status.value.is_idle:
                self.status.publish(TranscodeStatus.idle())
            logger.info("Transcode worker stopped")

    async def run_job(self, job: Job) -> bool:
        """Run one job to completion.

        Process failures are logged, not raised.

        Returns:
            True if ffmpeg exited successfully.
        """
        with job_context(job.slug):
            self.progress.publish(0.0)
            self.status.publish(TranscodeStatus.working(job))
            logger.info("ffmpeg process starting: %s", format_command(job.command))
            try:
                await self._run_ffmpeg(job)
            except TranscodeProcessError as e:
                logger.error("%s", e)
                return False
            finally:
                job.output.close()
            logger.info("Transcode %s completed", job.slug)
            return True

    async def _run_ffmpeg(self, job: Job) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                *job.command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise TranscodeProcessError(job.slug, None, str(e)) from e

        try:
            if process.stderr is not None:
                await self._consume_stderr(process.stderr, job)
            returncode = await process.wait()
        except asyncio.CancelledError:
            logger.warning("Worker cancelled, killing ffmpeg (pid %d)", process.pid)
            process.kill()
            await process.wait()
            raise
        except Exception:
            logger.error("Reading ffmpeg output failed, killing pid %d", process.pid)
            process.kill()
            await process.wait()
            raise

        logger.info("ffmpeg completed with status code %d", returncode)
        if returncode != 0:
            raise TranscodeProcessError(job.slug, returncode)

    async def _consume_stderr(self, stream: asyncio.StreamReader, job: Job) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            try:
                data = await stream.readuntil(STATUS_DELIMITER)
            except asyncio.IncompleteReadError as e:
                # EOF; whatever is left has no trailing carriage return
                if e.partial:
                    self._handle_chunk(job, decoder.decode(e.partial, final=True))
                return
            except asyncio.LimitOverrunError as e:
                data = await stream.readexactly(e.consumed)
            self._handle_chunk(job, decoder.decode(data))

    def _handle_chunk(self, job: Job, text: str) -> None:
        chunk = split_status_chunk(text)
        if chunk.output:
            job.output.append(chunk.output)
            logger.debug("ffmpeg output: %s", chunk.output.rstrip("\n"))

        elapsed = parse_elapsed_seconds(chunk.status)
        if elapsed is not None:
            self.progress.publish(elapsed)
        elif chunk.status.strip():
            logger.debug(
                "ffmpeg status line has no time= element, ignoring: %s",
                chunk.status,
            )
