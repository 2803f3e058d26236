"""Transcode planning: request resolution, command building and demuxing."""

from vtp.planning.builder import (
    TranscodePlan,
    build_transcode_plan,
    will_demux_audio,
)
from vtp.planning.defaults import default_request
from vtp.planning.demux import build_demux_commands, select_extraction_source
from vtp.planning.request import (
    JobSubmissionModel,
    TranscodeRequestModel,
    resolve_request,
    validate_encoders,
)

__all__ = [
    "JobSubmissionModel",
    "TranscodePlan",
    "TranscodeRequestModel",
    "build_demux_commands",
    "build_transcode_plan",
    "default_request",
    "resolve_request",
    "select_extraction_source",
    "validate_encoders",
    "will_demux_audio",
]
