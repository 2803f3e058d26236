"""Container compatibility rules for the streaming platform.

Each output container accepts a fixed set of video and audio codecs. When a
video and an audio codec could share more than one container, the first one
in CONTAINER_PRIORITY wins. The priority favors containers that browsers can
play progressively while the file is still being written.
"""

from __future__ import annotations

from enum import Enum

from vtp.core.codecs import AudioCodec, VideoCodec
from vtp.exceptions import NoCompatibleContainerError


class VideoContainer(Enum):
    """Container formats for video outputs."""

    MP4 = "mp4"
    WEBM = "webm"
    OGG = "ogg"

    @property
    def video_codecs(self) -> frozenset[VideoCodec]:
        return _VIDEO_CONTAINER_VIDEO_CODECS[self]

    @property
    def audio_codecs(self) -> frozenset[AudioCodec]:
        return _VIDEO_CONTAINER_AUDIO_CODECS[self]

    @property
    def extension(self) -> str:
        return _VIDEO_EXTENSIONS[self]

    @property
    def mime_type(self) -> str:
        return f"video/{self.value}"

    @property
    def preferred_audio_codec(self) -> AudioCodec:
        return AudioCodec.AAC if self is VideoContainer.MP4 else AudioCodec.OPUS

    @property
    def preferred_audio_encoder(self) -> str:
        """Encoder to use when audio must be re-encoded for this container."""
        return "aac" if self is VideoContainer.MP4 else "libopus"

    def accepts(self, video: VideoCodec, audio: AudioCodec | None = None) -> bool:
        """Check whether this container can hold the given codecs."""
        if video not in self.video_codecs:
            return False
        return audio is None or audio in self.audio_codecs

    @classmethod
    def from_extension(cls, extension: str) -> VideoContainer | None:
        """Look up a container by file extension (with or without a dot)."""
        ext = extension.lstrip(".").casefold()
        return next((c for c in cls if c.extension == ext), None)


class AudioContainer(Enum):
    """Container formats for standalone audio outputs.

    PSEUDO_M4A is an MP4 file holding MP3 audio. It uses the m4a extension
    but ffmpeg must be told the output format explicitly.
    """

    M4A = "m4a"
    OGG = "ogg"
    PSEUDO_M4A = "pseudo_m4a"

    @property
    def extension(self) -> str:
        return "ogg" if self is AudioContainer.OGG else "m4a"

    @property
    def mime_type(self) -> str:
        return "audio/ogg" if self is AudioContainer.OGG else "audio/mp4"

    @property
    def format_override(self) -> tuple[str, ...]:
        """Output format flags needed when the extension is misleading."""
        return ("-f", "mp4") if self is AudioContainer.PSEUDO_M4A else ()


# =============================================================================
# Compatibility Tables
# =============================================================================

CONTAINER_PRIORITY: tuple[VideoContainer, ...] = (
    VideoContainer.MP4,
    VideoContainer.WEBM,
    VideoContainer.OGG,
)

_VIDEO_CONTAINER_VIDEO_CODECS: dict[VideoContainer, frozenset[VideoCodec]] = {
    VideoContainer.MP4: frozenset(
        {VideoCodec.VP9, VideoCodec.AV1, VideoCodec.H264, VideoCodec.H265}
    ),
    VideoContainer.WEBM: frozenset({VideoCodec.VP8, VideoCodec.VP9, VideoCodec.AV1}),
    VideoContainer.OGG: frozenset({VideoCodec.VP8, VideoCodec.VP9, VideoCodec.THEORA}),
}

_VIDEO_CONTAINER_AUDIO_CODECS: dict[VideoContainer, frozenset[AudioCodec]] = {
    VideoContainer.MP4: frozenset(
        {
            AudioCodec.OPUS,
            AudioCodec.AAC,
            AudioCodec.ALAC,
            AudioCodec.FLAC,
            AudioCodec.MP3,
        }
    ),
    VideoContainer.WEBM: frozenset({AudioCodec.OPUS, AudioCodec.VORBIS}),
    VideoContainer.OGG: frozenset(
        {AudioCodec.OPUS, AudioCodec.VORBIS, AudioCodec.FLAC}
    ),
}

_VIDEO_EXTENSIONS: dict[VideoContainer, str] = {
    VideoContainer.MP4: "mp4",
    VideoContainer.WEBM: "webm",
    VideoContainer.OGG: "ogv",
}

# Container used for a video codec when no audio is embedded
_NATURAL_CONTAINERS: dict[VideoCodec, VideoContainer] = {
    VideoCodec.AV1: VideoContainer.WEBM,
    VideoCodec.VP8: VideoContainer.WEBM,
    VideoCodec.VP9: VideoContainer.WEBM,
    VideoCodec.H264: VideoContainer.MP4,
    VideoCodec.H265: VideoContainer.MP4,
    VideoCodec.THEORA: VideoContainer.OGG,
}

_AUDIO_CONTAINERS: dict[AudioCodec, AudioContainer] = {
    AudioCodec.AAC: AudioContainer.M4A,
    AudioCodec.ALAC: AudioContainer.M4A,
    AudioCodec.OPUS: AudioContainer.OGG,
    AudioCodec.VORBIS: AudioContainer.OGG,
    AudioCodec.FLAC: AudioContainer.OGG,
    AudioCodec.MP3: AudioContainer.PSEUDO_M4A,
}


# =============================================================================
# Resolution
# =============================================================================


def find_container_for(
    video: VideoCodec, audio: AudioCodec
) -> VideoContainer | None:
    """Find the first container in priority order that holds both codecs.

    Args:
        video: Video codec of the output.
        audio: Audio codec to embed alongside it.

    Returns:
        The first matching container in CONTAINER_PRIORITY, or None if no
        container accepts the pair.
    """
    for container in CONTAINER_PRIORITY:
        if container.accepts(video, audio):
            return container
    return None


def require_container_for(video: VideoCodec, audio: AudioCodec) -> VideoContainer:
    """Like find_container_for, but raise when no container fits.

    Raises:
        NoCompatibleContainerError: If no container accepts the pair.
    """
    container = find_container_for(video, audio)
    if container is None:
        raise NoCompatibleContainerError(video, audio)
    return container


def find_container_for_video(video: VideoCodec) -> VideoContainer:
    """Return the natural container for a video codec with no audio."""
    return _NATURAL_CONTAINERS[video]


def find_audio_container(audio: AudioCodec) -> AudioContainer:
    """Return the container for a standalone audio output."""
    return _AUDIO_CONTAINERS[audio]


def requires_experimental(container: VideoContainer, audio: AudioCodec) -> bool:
    """Check whether ffmpeg treats this muxing as experimental."""
    return container is VideoContainer.MP4 and audio is AudioCodec.FLAC
