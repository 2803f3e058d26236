"""Transcode job queue, worker and submission service."""

from vtp.jobs.models import Job, TranscodeStatus, WorkerState
from vtp.jobs.queue import TranscodeQueue
from vtp.jobs.service import TranscodeService, job_url_prefix
from vtp.jobs.status import LatestValue, OutputLog
from vtp.jobs.worker import TranscodeWorker

__all__ = [
    "Job",
    "LatestValue",
    "OutputLog",
    "TranscodeQueue",
    "TranscodeService",
    "TranscodeStatus",
    "TranscodeWorker",
    "WorkerState",
    "job_url_prefix",
]
