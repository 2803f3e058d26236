"""Codec registry and utilities.

This module is the single source of truth for the codecs the planner knows
about, including:
- The video and audio codec enums and their ffmpeg names
- Alias groups used when parsing user or tool supplied codec names
- Bitmap subtitle codecs, which cannot be converted to WebVTT

Container rules live in vtp.core.containers.
"""

from __future__ import annotations

from enum import Enum

# =============================================================================
# Codec Alias Groups
# =============================================================================
# Alternate spellings accepted when parsing a codec name. Keys are the
# canonical ffmpeg names used as enum values below.

VIDEO_CODEC_ALIASES: dict[str, frozenset[str]] = {
    "av1": frozenset({"av1", "av01", "libaom-av1"}),
    "vp8": frozenset({"vp8"}),
    "vp9": frozenset({"vp9", "vp09"}),
    "h264": frozenset({"h264", "h.264", "avc", "avc1"}),
    "hevc": frozenset({"hevc", "h265", "h.265", "hvc1", "hev1"}),
    "theora": frozenset({"theora"}),
}

AUDIO_CODEC_ALIASES: dict[str, frozenset[str]] = {
    "aac": frozenset({"aac", "mp4a"}),
    "alac": frozenset({"alac", "alac_latm"}),
    "opus": frozenset({"opus"}),
    "vorbis": frozenset({"vorbis"}),
    "flac": frozenset({"flac"}),
    "mp3": frozenset({"mp3"}),
}

# Bitmap subtitle codecs that cannot be converted to WebVTT (would require OCR)
BITMAP_SUBTITLE_CODECS: frozenset[str] = frozenset(
    {"dvb_subtitle", "dvd_subtitle", "hdmv_pgs_subtitle", "xsub"}
)


def _lookup(name: str, aliases: dict[str, frozenset[str]]) -> str | None:
    """Return the canonical name for a codec alias, or None."""
    key = name.strip().casefold()
    for canonical, group in aliases.items():
        if key in group:
            return canonical
    return None


# =============================================================================
# Codec Enums
# =============================================================================


class VideoCodec(Enum):
    """Video codecs the planner can target.

    Values are ffmpeg codec names. Declaration order matches the order used
    when reporting capabilities.
    """

    AV1 = "av1"
    VP8 = "vp8"
    VP9 = "vp9"
    H264 = "h264"
    H265 = "hevc"
    THEORA = "theora"

    @classmethod
    def parse(cls, name: str) -> VideoCodec | None:
        """Parse an ffmpeg or user supplied codec name.

        Args:
            name: Codec name such as "h264", "hevc" or "H.265".

        Returns:
            Matching VideoCodec, or None if the name is not recognized.
        """
        canonical = _lookup(name, VIDEO_CODEC_ALIASES)
        return cls(canonical) if canonical else None

    @property
    def display_name(self) -> str:
        return _VIDEO_DISPLAY_NAMES[self]

    def __str__(self) -> str:
        return self.display_name


class AudioCodec(Enum):
    """Audio codecs the planner can target. Values are ffmpeg codec names."""

    AAC = "aac"
    ALAC = "alac"
    OPUS = "opus"
    VORBIS = "vorbis"
    FLAC = "flac"
    MP3 = "mp3"

    @classmethod
    def parse(cls, name: str) -> AudioCodec | None:
        """Parse an ffmpeg or user supplied codec name.

        Args:
            name: Codec name such as "aac" or "alac_latm".

        Returns:
            Matching AudioCodec, or None if the name is not recognized.
        """
        canonical = _lookup(name, AUDIO_CODEC_ALIASES)
        return cls(canonical) if canonical else None

    @property
    def display_name(self) -> str:
        return _AUDIO_DISPLAY_NAMES[self]

    @property
    def is_lossless(self) -> bool:
        return self in (AudioCodec.FLAC, AudioCodec.ALAC)

    def __str__(self) -> str:
        return self.display_name


_VIDEO_DISPLAY_NAMES: dict[VideoCodec, str] = {
    VideoCodec.AV1: "AV1",
    VideoCodec.VP8: "VP8",
    VideoCodec.VP9: "VP9",
    VideoCodec.H264: "H.264",
    VideoCodec.H265: "H.265",
    VideoCodec.THEORA: "Theora",
}

_AUDIO_DISPLAY_NAMES: dict[AudioCodec, str] = {
    AudioCodec.AAC: "AAC",
    AudioCodec.ALAC: "ALAC",
    AudioCodec.OPUS: "Opus",
    AudioCodec.VORBIS: "Vorbis",
    AudioCodec.FLAC: "FLAC",
    AudioCodec.MP3: "MP3",
}


def is_bitmap_subtitle(codec: str | None) -> bool:
    """Check whether a subtitle codec is image based.

    Args:
        codec: ffmpeg subtitle codec name, or None.

    Returns:
        True if the codec cannot be converted to a text subtitle format.
    """
    if not codec:
        return False
    return codec.casefold() in BITMAP_SUBTITLE_CODECS
