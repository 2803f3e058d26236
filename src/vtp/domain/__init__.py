"""Domain models shared by the probes, the planner and the job queue."""

from vtp.domain.models import (
    COPY_ENCODER,
    ProbeResult,
    Track,
    TrackKind,
    TrackSelection,
    TranscodeRequest,
)

__all__ = [
    "COPY_ENCODER",
    "ProbeResult",
    "Track",
    "TrackKind",
    "TrackSelection",
    "TranscodeRequest",
]
