"""Job and worker status models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from vtp.jobs.status import OutputLog
from vtp.planning.builder import TranscodePlan


@dataclass
class Job:
    """A queued transcode.

    Attributes:
        slug: Name of the job's output directory; identifies the job.
        source: Source media file.
        plan: The ffmpeg command and manifest built at submission.
        duration: Source duration in seconds, for progress reporting.
        output: ffmpeg's log output (status lines excluded).
    """

    slug: str
    source: Path
    plan: TranscodePlan
    duration: float
    output: OutputLog = field(default_factory=OutputLog)

    @property
    def command(self) -> tuple[str, ...]:
        return self.plan.command


class WorkerState(Enum):
    IDLE = "idle"
    WORKING = "working"


@dataclass(frozen=True)
class TranscodeStatus:
    """What the worker is doing.

    Idle carries no job. Working carries the running job's slug and source
    duration.
    """

    state: WorkerState
    job: Job | None = None

    @classmethod
    def idle(cls) -> TranscodeStatus:
        return cls(WorkerState.IDLE)

    @classmethod
    def working(cls, job: Job) -> TranscodeStatus:
        return cls(WorkerState.WORKING, job)

    @property
    def is_idle(self) -> bool:
        return self.state is WorkerState.IDLE

    @property
    def slug(self) -> str | None:
        return self.job.slug if self.job is not None else None

    @property
    def duration(self) -> float | None:
        return self.job.duration if self.job is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if self.job is None:
            return {"state": self.state.value}
        return {
            "state": self.state.value,
            "slug": self.job.slug,
            "duration": self.job.duration,
        }
