"""ffmpeg capability detection and live progress parsing."""

from vtp.tools.detection import parse_codec_listing, probe_capabilities
from vtp.tools.ffmpeg_progress import (
    ProgressChunk,
    parse_elapsed_seconds,
    progress_percent,
    split_status_chunk,
)
from vtp.tools.models import Capabilities, CodecCapability
from vtp.tools.registry import CapabilityRegistry

__all__ = [
    "Capabilities",
    "CapabilityRegistry",
    "CodecCapability",
    "ProgressChunk",
    "parse_codec_listing",
    "parse_elapsed_seconds",
    "probe_capabilities",
    "progress_percent",
    "split_status_chunk",
]
