"""Domain models for the transcode planner.

These models describe a probed source file and the user's selections for
transcoding it. They are immutable: a probe result is shared between the
probe cache and any number of planning operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from vtp.core.codecs import AudioCodec, VideoCodec

# Encoder name meaning "pass the stream through without re-encoding"
COPY_ENCODER = "copy"


class TrackKind(Enum):
    """Kind of elementary stream. Values are ffprobe codec_type names."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"

    @classmethod
    def parse(cls, codec_type: str) -> TrackKind | None:
        try:
            return cls(codec_type)
        except ValueError:
            return None


@dataclass(frozen=True)
class Track:
    """One stream inside a source file, as reported by ffprobe."""

    index: int
    kind: TrackKind
    codec: str
    height: int | None = None
    language: str | None = None
    title: str | None = None
    channels: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "index": self.index,
            "kind": self.kind.value,
            "codec": self.codec,
            "height": self.height,
            "language": self.language,
            "title": self.title,
            "channels": self.channels,
        }


@dataclass(frozen=True)
class ProbeResult:
    """Result of probing one source file."""

    path: Path
    duration: float
    tracks: tuple[Track, ...] = ()
    bit_rate: int | None = None
    title: str | None = None

    def get_track(self, index: int) -> Track | None:
        """Return the track with the given stream index, or None."""
        return next((t for t in self.tracks if t.index == index), None)

    def tracks_of_kind(self, kind: TrackKind) -> list[Track]:
        return [t for t in self.tracks if t.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "duration": self.duration,
            "bit_rate": self.bit_rate,
            "title": self.title,
            "tracks": [t.to_dict() for t in self.tracks],
        }


@dataclass(frozen=True)
class TrackSelection:
    """A request to produce one output stream from a source track.

    Attributes:
        track: The source track.
        codec: Target codec (VideoCodec for video, AudioCodec for audio).
        encoder: ffmpeg encoder name, "copy" for passthrough, or "" to let
            ffmpeg pick the default encoder for the codec.
        bitrate: Optional target bitrate in kbit/s.
        extra_args: Extra ffmpeg arguments placed after the codec flags.
    """

    track: Track
    codec: VideoCodec | AudioCodec
    encoder: str = COPY_ENCODER
    bitrate: int | None = None
    extra_args: tuple[str, ...] = ()

    @property
    def is_passthrough(self) -> bool:
        return self.encoder == COPY_ENCODER

    @property
    def encoder_name(self) -> str:
        """Encoder passed to ffmpeg; falls back to the codec name."""
        return self.encoder or self.codec.value


@dataclass(frozen=True)
class TranscodeRequest:
    """The full unit of work for one source file.

    Every track referenced by a selection must belong to the probe result
    the request was built from, and be of the matching kind.
    """

    title: str
    duration: float
    video: tuple[TrackSelection, ...] = ()
    audio: tuple[TrackSelection, ...] = ()
    subtitles: tuple[Track, ...] = ()
    extra_args: tuple[str, ...] = ()
    force_demux_audio: bool = False
    add_muxed_silence: bool = False
