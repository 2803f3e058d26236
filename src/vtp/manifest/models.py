"""Manifest models describing every file a transcode produces.

A Manifest is written next to the output files as manifest.json so that the
publishing step and the demux planner can work without re-probing the
source. Field names in to_dict() are part of the on-disk format.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from vtp.core.codecs import AudioCodec, VideoCodec
from vtp.core.containers import AudioContainer, VideoContainer

# Language recorded when a source track has no language tag
UNKNOWN_LANGUAGE = "unk"


@dataclass(frozen=True)
class VideoOutput:
    """One video output file, possibly with embedded audio."""

    filename: str
    container: VideoContainer
    video_codec: VideoCodec
    height: int = 0
    audio_codec: AudioCodec | None = None
    audio_is_silent: bool = False

    @property
    def has_source_audio(self) -> bool:
        """True when the file embeds real (non-synthetic) audio."""
        return self.audio_codec is not None and not self.audio_is_silent

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "container": self.container.value,
            "video_codec": self.video_codec.value,
            "audio_codec": self.audio_codec.value if self.audio_codec else None,
            "audio_is_silent": self.audio_is_silent,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoOutput:
        audio = data.get("audio_codec")
        return cls(
            filename=data["filename"],
            container=VideoContainer(data["container"]),
            video_codec=VideoCodec(data["video_codec"]),
            height=int(data.get("height") or 0),
            audio_codec=AudioCodec(audio) if audio else None,
            audio_is_silent=bool(data.get("audio_is_silent", False)),
        )


@dataclass(frozen=True)
class AudioOutput:
    """One standalone audio output file."""

    filename: str
    container: AudioContainer
    codec: AudioCodec
    language: str = UNKNOWN_LANGUAGE
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "container": self.container.value,
            "codec": self.codec.value,
            "language": self.language,
            "title": self.title,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AudioOutput:
        return cls(
            filename=data["filename"],
            container=AudioContainer(data["container"]),
            codec=AudioCodec(data["codec"]),
            language=data.get("language") or UNKNOWN_LANGUAGE,
            title=data.get("title"),
        )


@dataclass(frozen=True)
class TextOutput:
    """One WebVTT subtitle output file."""

    filename: str
    language: str | None = None
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "language": self.language,
            "title": self.title,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextOutput:
        return cls(
            filename=data["filename"],
            language=data.get("language"),
            title=data.get("title"),
        )


@dataclass(frozen=True)
class MuxedAudio:
    """Language and title of the audio embedded in the video outputs.

    Recorded so a later demux pass can label the extracted audio file.
    """

    language: str = UNKNOWN_LANGUAGE
    title: str | None = None


@dataclass(frozen=True)
class Manifest:
    """All outputs produced from one source file."""

    title: str
    duration: float
    video_files: tuple[VideoOutput, ...] = ()
    audio_files: tuple[AudioOutput, ...] = ()
    text_files: tuple[TextOutput, ...] = ()
    muxed_audio: MuxedAudio | None = None

    @property
    def filenames(self) -> list[str]:
        return [
            f.filename
            for f in (*self.video_files, *self.audio_files, *self.text_files)
        ]

    def discard(
        self,
        video: Iterable[str] = (),
        audio: Iterable[str] = (),
        text: Iterable[str] = (),
    ) -> Manifest:
        """Return a copy without the outputs whose filenames are listed.

        Args:
            video: Filenames of video outputs to drop.
            audio: Filenames of audio outputs to drop.
            text: Filenames of subtitle outputs to drop.

        Returns:
            A new Manifest; this one is unchanged.
        """
        drop_video, drop_audio, drop_text = set(video), set(audio), set(text)
        return replace(
            self,
            video_files=tuple(
                f for f in self.video_files if f.filename not in drop_video
            ),
            audio_files=tuple(
                f for f in self.audio_files if f.filename not in drop_audio
            ),
            text_files=tuple(
                f for f in self.text_files if f.filename not in drop_text
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        muxed = None
        if self.muxed_audio is not None:
            muxed = {
                "language": self.muxed_audio.language,
                "title": self.muxed_audio.title,
            }
        return {
            "title": self.title,
            "duration": self.duration,
            "video_files": [f.to_dict() for f in self.video_files],
            "audio_files": [f.to_dict() for f in self.audio_files],
            "text_files": [f.to_dict() for f in self.text_files],
            "muxed_audio": muxed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Manifest:
        """Build a Manifest from its to_dict() form.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a codec or container name is unknown.
        """
        muxed = data.get("muxed_audio")
        return cls(
            title=data["title"],
            duration=float(data["duration"]),
            video_files=tuple(map(VideoOutput.from_dict, data.get("video_files", []))),
            audio_files=tuple(map(AudioOutput.from_dict, data.get("audio_files", []))),
            text_files=tuple(map(TextOutput.from_dict, data.get("text_files", []))),
            muxed_audio=(
                MuxedAudio(
                    language=muxed.get("language") or UNKNOWN_LANGUAGE,
                    title=muxed.get("title"),
                )
                if muxed
                else None
            ),
        )


@dataclass
class ManifestBuilder:
    """Accumulates outputs while a plan is being built."""

    title: str
    duration: float
    video_files: list[VideoOutput] = field(default_factory=list)
    audio_files: list[AudioOutput] = field(default_factory=list)
    text_files: list[TextOutput] = field(default_factory=list)
    muxed_audio: MuxedAudio | None = None

    def build(self) -> Manifest:
        return Manifest(
            title=self.title,
            duration=self.duration,
            video_files=tuple(self.video_files),
            audio_files=tuple(self.audio_files),
            text_files=tuple(self.text_files),
            muxed_audio=self.muxed_audio,
        )
