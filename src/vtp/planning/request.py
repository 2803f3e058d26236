"""Wire-format transcode requests and their resolution against a probe.

Clients submit selections by track index. The payload is validated with
Pydantic, then each index is looked up in the source's probe result to
build a TranscodeRequest. Anything wrong with the references is rejected
here, before any plan is built or process started.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vtp.core.codecs import AudioCodec, VideoCodec
from vtp.domain.models import (
    COPY_ENCODER,
    ProbeResult,
    Track,
    TrackKind,
    TrackSelection,
    TranscodeRequest,
)
from vtp.exceptions import (
    ConflictingSelectionError,
    InvalidTrackReferenceError,
    UnsupportedEncoderError,
)
from vtp.tools.models import Capabilities

# Options that would add inputs or outputs, or write files outside the
# job's output directory
FORBIDDEN_FFMPEG_ARGS = frozenset(
    {
        "-i",
        "-attach",
        "-dump_attachment",
        "-filter_script",
        "-filter_complex_script",
        "-passlogfile",
        "-progress",
        "-report",
        "-vstats_file",
    }
)

FORBIDDEN_FFMPEG_ARG_PATTERNS = ("\n", "\r", "\x00")

# Limits for ffmpeg_args to prevent abuse
MAX_FFMPEG_ARGS_COUNT = 50
MAX_FFMPEG_ARG_LENGTH = 1024

SLUG_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9._-]{0,127}$")


def validate_ffmpeg_args(args: list[str]) -> list[str]:
    """Reject extra ffmpeg arguments that are unsafe to pass through.

    Raises:
        ValueError: If an argument is forbidden or limits are exceeded.
    """
    if len(args) > MAX_FFMPEG_ARGS_COUNT:
        raise ValueError(
            f"extra_ffmpeg_args count exceeds limit: "
            f"{len(args)} > {MAX_FFMPEG_ARGS_COUNT}"
        )
    for i, arg in enumerate(args):
        if len(arg) > MAX_FFMPEG_ARG_LENGTH:
            raise ValueError(
                f"extra_ffmpeg_args[{i}] exceeds length limit: "
                f"{len(arg)} > {MAX_FFMPEG_ARG_LENGTH}"
            )
        if arg in FORBIDDEN_FFMPEG_ARGS:
            raise ValueError(f"extra_ffmpeg_args[{i}]: option {arg} is not allowed")
        for pattern in FORBIDDEN_FFMPEG_ARG_PATTERNS:
            if pattern in arg:
                raise ValueError(
                    f"extra_ffmpeg_args[{i}] contains a forbidden control character"
                )
    return args


class _SelectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    track: int = Field(ge=0)
    codec: str
    encoder: str = COPY_ENCODER
    bitrate: int | None = Field(default=None, gt=0)
    extra_ffmpeg_args: list[str] = Field(default_factory=list)

    @field_validator("extra_ffmpeg_args")
    @classmethod
    def check_extra_args(cls, v: list[str]) -> list[str]:
        return validate_ffmpeg_args(v)

    @field_validator("encoder")
    @classmethod
    def check_encoder(cls, v: str) -> str:
        if v and not re.fullmatch(r"[A-Za-z0-9_-]+", v):
            raise ValueError(f"Invalid encoder name '{v}'")
        return v


class VideoSelectionModel(_SelectionModel):
    """Selection of a video track and its target codec."""

    @field_validator("codec")
    @classmethod
    def check_codec(cls, v: str) -> str:
        codec = VideoCodec.parse(v)
        if codec is None:
            valid = ", ".join(c.value for c in VideoCodec)
            raise ValueError(f"Invalid video codec '{v}'. Must be one of: {valid}")
        return codec.value


class AudioSelectionModel(_SelectionModel):
    """Selection of an audio track and its target codec."""

    @field_validator("codec")
    @classmethod
    def check_codec(cls, v: str) -> str:
        codec = AudioCodec.parse(v)
        if codec is None:
            valid = ", ".join(c.value for c in AudioCodec)
            raise ValueError(f"Invalid audio codec '{v}'. Must be one of: {valid}")
        return codec.value


class TranscodeRequestModel(BaseModel):
    """Transcode request as submitted by a client."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    video_tracks: list[VideoSelectionModel] = Field(default_factory=list)
    audio_tracks: list[AudioSelectionModel] = Field(default_factory=list)
    subtitle_tracks: list[int] = Field(default_factory=list)
    title: str | None = Field(default=None, max_length=512)
    extra_ffmpeg_args: list[str] = Field(default_factory=list)
    force_demux_audio: bool = False
    add_muxed_silence: bool = False

    @field_validator("extra_ffmpeg_args")
    @classmethod
    def check_extra_args(cls, v: list[str]) -> list[str]:
        return validate_ffmpeg_args(v)

    @classmethod
    def from_request(cls, request: TranscodeRequest) -> TranscodeRequestModel:
        """Express a resolved request in wire format, e.g. to offer defaults."""

        def selection(sel: TrackSelection) -> dict[str, Any]:
            return {
                "track": sel.track.index,
                "codec": sel.codec.value,
                "encoder": sel.encoder,
                "bitrate": sel.bitrate,
                "extra_ffmpeg_args": list(sel.extra_args),
            }

        return cls(
            video_tracks=[selection(s) for s in request.video],
            audio_tracks=[selection(s) for s in request.audio],
            subtitle_tracks=[t.index for t in request.subtitles],
            title=request.title,
            extra_ffmpeg_args=list(request.extra_args),
            force_demux_audio=request.force_demux_audio,
            add_muxed_silence=request.add_muxed_silence,
        )


class JobSubmissionModel(TranscodeRequestModel):
    """A transcode request plus the output directory name."""

    slug: str

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str) -> str:
        if not SLUG_PATTERN.match(v):
            raise ValueError(
                "slug must be 1-128 characters of letters, digits, '.', '_' or '-'"
                " and must not start with '.'"
            )
        return v


# =============================================================================
# Resolution
# =============================================================================


def _lookup_track(probe: ProbeResult, index: int, kind: TrackKind) -> Track:
    track = probe.get_track(index)
    if track is None:
        raise InvalidTrackReferenceError(index)
    if track.kind != kind:
        raise InvalidTrackReferenceError(
            index, f"Track {index} is a {track.kind.value} track, not {kind.value}"
        )
    return track


def _check_selections(selections: tuple[TrackSelection, ...]) -> None:
    video_copied = False
    passthrough: dict[int, bool] = {}
    for selection in selections:
        index = selection.track.index
        copied = selection.is_passthrough
        if copied and selection.track.kind == TrackKind.VIDEO:
            if video_copied:
                raise ConflictingSelectionError(
                    index, "Only one video track can be copied without re-encoding"
                )
            video_copied = True
        if passthrough.setdefault(index, copied) != copied:
            raise ConflictingSelectionError(
                index, f"Track {index} cannot be both copied and re-encoded"
            )


def resolve_request(
    model: TranscodeRequestModel, probe: ProbeResult
) -> TranscodeRequest:
    """Resolve a wire request's track indices against a probe result.

    Args:
        model: Validated request payload.
        probe: Probe result of the source file.

    Returns:
        TranscodeRequest referencing the probed tracks. The title falls back
        to the container title, then to the file name without extension.

    Raises:
        InvalidTrackReferenceError: If an index is missing from the probe
            result or names a track of the wrong kind.
        ConflictingSelectionError: If two video selections are copied, or
            one track is both copied and re-encoded.
    """
    video = tuple(
        TrackSelection(
            track=_lookup_track(probe, sel.track, TrackKind.VIDEO),
            codec=VideoCodec(sel.codec),
            encoder=sel.encoder,
            bitrate=sel.bitrate,
            extra_args=tuple(sel.extra_ffmpeg_args),
        )
        for sel in model.video_tracks
    )
    audio = tuple(
        TrackSelection(
            track=_lookup_track(probe, sel.track, TrackKind.AUDIO),
            codec=AudioCodec(sel.codec),
            encoder=sel.encoder,
            bitrate=sel.bitrate,
            extra_args=tuple(sel.extra_ffmpeg_args),
        )
        for sel in model.audio_tracks
    )
    subtitles = tuple(
        _lookup_track(probe, index, TrackKind.SUBTITLE)
        for index in model.subtitle_tracks
    )
    _check_selections((*video, *audio))
    return TranscodeRequest(
        title=model.title or probe.title or probe.path.stem,
        duration=probe.duration,
        video=video,
        audio=audio,
        subtitles=subtitles,
        extra_args=tuple(model.extra_ffmpeg_args),
        force_demux_audio=model.force_demux_audio,
        add_muxed_silence=model.add_muxed_silence,
    )


def validate_encoders(request: TranscodeRequest, capabilities: Capabilities) -> None:
    """Check every re-encoding selection against ffmpeg's capabilities.

    Passthrough selections are always accepted. An empty encoder name only
    requires that ffmpeg can encode the codec at all, as does naming the
    codec itself as the encoder.

    Raises:
        UnsupportedEncoderError: If ffmpeg cannot encode a codec, or lacks
            the named encoder.
    """
    for selection in (*request.video, *request.audio):
        if selection.is_passthrough:
            continue
        encoders = capabilities.encoders_for(selection.codec)
        if encoders is None:
            raise UnsupportedEncoderError(selection.codec, selection.encoder_name)
        if (
            selection.encoder
            and encoders
            and selection.encoder != selection.codec.value
            and selection.encoder not in encoders
        ):
            raise UnsupportedEncoderError(selection.codec, selection.encoder)
