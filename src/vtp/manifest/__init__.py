"""Manifest models, platform descriptors and their on-disk form."""

from vtp.manifest.descriptor import (
    QUALITY_LADDER,
    PlatformDescriptor,
    snap_to_quality,
    to_platform_descriptor,
)
from vtp.manifest.io import (
    DESCRIPTOR_FILENAME,
    MANIFEST_FILENAME,
    load_manifest,
    write_descriptor,
    write_manifest,
)
from vtp.manifest.models import (
    UNKNOWN_LANGUAGE,
    AudioOutput,
    Manifest,
    MuxedAudio,
    TextOutput,
    VideoOutput,
)

__all__ = [
    "DESCRIPTOR_FILENAME",
    "MANIFEST_FILENAME",
    "QUALITY_LADDER",
    "UNKNOWN_LANGUAGE",
    "AudioOutput",
    "Manifest",
    "MuxedAudio",
    "PlatformDescriptor",
    "TextOutput",
    "VideoOutput",
    "load_manifest",
    "snap_to_quality",
    "to_platform_descriptor",
    "write_descriptor",
    "write_manifest",
]
