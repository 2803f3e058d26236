"""Core utilities package.

Codec and container tables, language tables and subprocess helpers shared
by the planner, the probes and the job worker.
"""

from vtp.core.codecs import (
    AUDIO_CODEC_ALIASES,
    BITMAP_SUBTITLE_CODECS,
    VIDEO_CODEC_ALIASES,
    AudioCodec,
    VideoCodec,
    is_bitmap_subtitle,
)
from vtp.core.containers import (
    CONTAINER_PRIORITY,
    AudioContainer,
    VideoContainer,
    find_audio_container,
    find_container_for,
    find_container_for_video,
    require_container_for,
    requires_experimental,
)
from vtp.core.languages import (
    LOCALIZED_NAMES,
    PLATFORM_TAGS,
    language_label,
    platform_language_tag,
)
from vtp.core.paths import resolve_within
from vtp.core.subprocess_utils import format_command, run_command

__all__ = [
    "AUDIO_CODEC_ALIASES",
    "BITMAP_SUBTITLE_CODECS",
    "CONTAINER_PRIORITY",
    "LOCALIZED_NAMES",
    "PLATFORM_TAGS",
    "VIDEO_CODEC_ALIASES",
    "AudioCodec",
    "AudioContainer",
    "VideoCodec",
    "VideoContainer",
    "find_audio_container",
    "find_container_for",
    "find_container_for_video",
    "format_command",
    "is_bitmap_subtitle",
    "language_label",
    "platform_language_tag",
    "require_container_for",
    "requires_experimental",
    "resolve_within",
    "run_command",
]
