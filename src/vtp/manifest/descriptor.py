"""Platform-facing descriptor generation.

The streaming platform consumes a JSON document listing the playable
sources, audio tracks and subtitle tracks for one item. Resolutions are
snapped to the platform's quality ladder and language codes are translated
to the tags it understands.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from vtp.core.languages import language_label, platform_language_tag
from vtp.manifest.models import AudioOutput, Manifest, TextOutput, VideoOutput

logger = logging.getLogger(__name__)

# Vertical resolutions the platform recognizes, ascending
QUALITY_LADDER: tuple[int, ...] = (240, 360, 480, 540, 720, 1080, 2160)

# Quality reported for audio-only sources
AUDIO_SOURCE_QUALITY = 240

TEXT_TRACK_MIME_TYPE = "text/vtt"


def snap_to_quality(height: int, ladder: tuple[int, ...] = QUALITY_LADDER) -> int:
    """Snap a vertical resolution to the nearest quality tier.

    Walks the ladder upward and stops at the first tier above the value. The
    tier below is chosen only when it is strictly closer; values past the top
    of the ladder are clamped to the largest tier.

    Args:
        height: Vertical resolution in pixels.
        ladder: Ascending quality tiers.

    Returns:
        A value from the ladder.

    Example:
        >>> snap_to_quality(700)
        720
        >>> snap_to_quality(2200)
        2160
    """
    below_distance: int | None = None
    for i, tier in enumerate(ladder):
        if tier > height:
            if below_distance is not None and tier - height > below_distance:
                return ladder[i - 1]
            return tier
        below_distance = height - tier
    return ladder[-1]


# =============================================================================
# Descriptor Schema
# =============================================================================


class _DescriptorModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PlatformSource(_DescriptorModel):
    url: str
    content_type: str = Field(alias="contentType")
    quality: int
    bitrate: int | None = None


class PlatformAudioTrack(_DescriptorModel):
    url: str
    content_type: str = Field(alias="contentType")
    label: str
    language: str


class PlatformTextTrack(_DescriptorModel):
    url: str
    content_type: str = Field(alias="contentType", default=TEXT_TRACK_MIME_TYPE)
    name: str


class PlatformDescriptor(_DescriptorModel):
    """Top-level platform document for one published item."""

    title: str
    duration: float
    live: bool = False
    sources: list[PlatformSource]
    audio_tracks: list[PlatformAudioTrack] = Field(alias="audioTracks")
    text_tracks: list[PlatformTextTrack] = Field(alias="textTracks")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


# =============================================================================
# Conversion
# =============================================================================


def video_source(output: VideoOutput, url_prefix: str) -> PlatformSource:
    return PlatformSource(
        url=url_prefix + output.filename,
        content_type=output.container.mime_type,
        quality=snap_to_quality(output.height),
    )


def audio_source(output: AudioOutput, url_prefix: str) -> PlatformSource:
    return PlatformSource(
        url=url_prefix + output.filename,
        content_type=output.container.mime_type,
        quality=AUDIO_SOURCE_QUALITY,
    )


def audio_track(output: AudioOutput, url_prefix: str) -> PlatformAudioTrack:
    return PlatformAudioTrack(
        url=url_prefix + output.filename,
        content_type=output.container.mime_type,
        label=language_label(output.language, output.title) or output.language,
        language=platform_language_tag(output.language),
    )


def text_track(output: TextOutput, url_prefix: str) -> PlatformTextTrack:
    if output.language is not None:
        name = language_label(output.language, output.title) or output.language
    else:
        name = output.title or "Unknown"
    return PlatformTextTrack(url=url_prefix + output.filename, name=name)


def to_platform_descriptor(manifest: Manifest, url_prefix: str) -> PlatformDescriptor:
    """Convert a manifest into the platform's descriptor document.

    URLs are the prefix concatenated with each filename; the prefix should
    normally end with a slash.

    Args:
        manifest: Manifest produced by the plan builder.
        url_prefix: Public URL of the job's output directory.

    Returns:
        The descriptor. Audio files are listed as sources only when the
        manifest holds no video outputs.
    """
    if manifest.video_files:
        sources = [video_source(v, url_prefix) for v in manifest.video_files]
    else:
        sources = [audio_source(a, url_prefix) for a in manifest.audio_files]

    descriptor = PlatformDescriptor(
        title=manifest.title,
        duration=manifest.duration,
        sources=sources,
        audio_tracks=[audio_track(a, url_prefix) for a in manifest.audio_files],
        text_tracks=[text_track(t, url_prefix) for t in manifest.text_files],
    )
    logger.debug(
        "Built descriptor for %s: %d sources, %d audio tracks, %d text tracks",
        manifest.title,
        len(descriptor.sources),
        len(descriptor.audio_tracks),
        len(descriptor.text_tracks),
    )
    return descriptor
