"""Data models for ffmpeg encoding capabilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from vtp.core.codecs import AudioCodec, VideoCodec


@dataclass(frozen=True)
class CodecCapability:
    """One codec ffmpeg can encode on this host.

    Attributes:
        codec: The codec.
        encoders: Named encoder implementations, e.g. ("libx264",
            "h264_nvenc"). Empty when ffmpeg lists only its default encoder.
    """

    codec: VideoCodec | AudioCodec
    encoders: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "codec": self.codec.value,
            "name": self.codec.display_name,
            "encoders": list(self.encoders),
        }


@dataclass(frozen=True)
class Capabilities:
    """Encodable codecs reported by `ffmpeg -codecs`, in listing order."""

    video: tuple[CodecCapability, ...] = ()
    audio: tuple[CodecCapability, ...] = ()

    def encoders_for(self, codec: VideoCodec | AudioCodec) -> tuple[str, ...] | None:
        """Return the named encoders for a codec.

        Returns:
            Tuple of encoder names (possibly empty), or None if ffmpeg
            cannot encode the codec at all.
        """
        entries = self.video if isinstance(codec, VideoCodec) else self.audio
        for entry in entries:
            if entry.codec == codec:
                return entry.encoders
        return None

    def can_encode(self, codec: VideoCodec | AudioCodec) -> bool:
        return self.encoders_for(codec) is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "video": [c.to_dict() for c in self.video],
            "audio": [c.to_dict() for c in self.audio],
        }
