"""Build the ffmpeg invocation and manifest for a transcode request.

A single ffmpeg process produces every output file for a request: one file
per video selection, either with the audio embedded ("muxed") or with each
audio selection written to its own file ("demuxed"), plus one WebVTT file
per subtitle track.

Audio is demuxed when forced, when there is not exactly one audio
selection, or when some video codec cannot share a container with the
audio codec. A browser playing a video file with embedded audio alongside
separate audio tracks would play both at once, so multiple audio selections
always become separate files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from vtp.core.codecs import AudioCodec
from vtp.core.containers import (
    VideoContainer,
    find_audio_container,
    find_container_for,
    find_container_for_video,
    require_container_for,
    requires_experimental,
)
from vtp.domain.models import TrackSelection, TranscodeRequest
from vtp.manifest.models import (
    UNKNOWN_LANGUAGE,
    AudioOutput,
    Manifest,
    ManifestBuilder,
    MuxedAudio,
    TextOutput,
    VideoOutput,
)

logger = logging.getLogger(__name__)

# Input mapping of the synthetic silent track (second ffmpeg input)
SILENCE_INPUT_MAP = "1:0"
SILENCE_SOURCE = "anullsrc=channel_layout=stereo:sample_rate=48000"

# Filename component used when a track has no language tag
UNKNOWN_FILENAME_LANGUAGE = "unknown"


@dataclass(frozen=True)
class TranscodePlan:
    """Everything needed to run one transcode.

    Attributes:
        command: Full ffmpeg argument list, executable first.
        manifest: Description of every output file.
        demux_audio: True if audio was written to standalone files.
        output_dir: Directory the output files are written to.
    """

    command: tuple[str, ...]
    manifest: Manifest
    demux_audio: bool
    output_dir: Path


@dataclass(frozen=True)
class _EmbeddedAudio:
    """Audio stream embedded into every video output."""

    input_map: str
    selection: TrackSelection | None = None

    @property
    def is_silent(self) -> bool:
        return self.selection is None


def will_demux_audio(request: TranscodeRequest) -> bool:
    """Decide whether audio must be written to standalone files.

    Args:
        request: The transcode request.

    Returns:
        True if demuxing is forced, if there is not exactly one audio
        selection, or if any video codec cannot share a container with the
        single audio codec.
    """
    if request.force_demux_audio:
        return True
    if len(request.audio) != 1:
        return True
    audio_codec = request.audio[0].codec
    return any(
        find_container_for(video.codec, audio_codec) is None
        for video in request.video
    )


def video_filename(selection: TrackSelection, container: VideoContainer) -> str:
    """Output filename for a video selection.

    Passthrough output gets a fixed name since there can be only one.
    """
    if selection.is_passthrough:
        return f"main.{container.extension}"
    index, codec = selection.track.index, selection.codec.value
    return f"video{index}_{codec}.{container.extension}"


def audio_filename(selection: TrackSelection, extension: str) -> str:
    language = selection.track.language or UNKNOWN_FILENAME_LANGUAGE
    return f"audio_{selection.track.index}_{language}.{extension}"


def subtitle_filename(index: int, language: str | None) -> str:
    return f"sub_{index}_{language or UNKNOWN_FILENAME_LANGUAGE}.vtt"


def build_transcode_plan(
    source: Path,
    request: TranscodeRequest,
    output_dir: Path,
    ffmpeg_path: str = "ffmpeg",
) -> TranscodePlan:
    """Build the ffmpeg command and manifest for a request.

    Preconditions, not re-checked here:
    - every selection references a track of the matching kind
    - at most one video selection is passthrough
    - subtitle tracks are text based (bitmap subtitles filtered out)

    Args:
        source: Source media file.
        request: Selections and policy flags.
        output_dir: Directory that will receive the output files.
        ffmpeg_path: ffmpeg executable to invoke.

    Returns:
        TranscodePlan with the command, manifest and demux decision.

    Raises:
        NoCompatibleContainerError: If embedded audio cannot share a
            container with a video selection.
    """
    cmd: list[str] = [ffmpeg_path, "-hide_banner"]
    cmd.extend(request.extra_args)
    cmd.extend(["-i", str(source)])

    demux = will_demux_audio(request)
    manifest = ManifestBuilder(title=request.title, duration=request.duration)

    embedded: _EmbeddedAudio | None = None
    if not demux:
        audio = request.audio[0]
        embedded = _EmbeddedAudio(f"0:{audio.track.index}", audio)
    elif request.add_muxed_silence:
        # Some browsers pause separate audio when the video is not visible;
        # a silent embedded track avoids it
        cmd.extend(
            ["-f", "lavfi", "-t", str(request.duration), "-i", SILENCE_SOURCE]
        )
        embedded = _EmbeddedAudio(SILENCE_INPUT_MAP)

    for video in request.video:
        manifest.video_files.append(
            _add_video_output(cmd, video, embedded, output_dir)
        )

    if demux:
        for audio in request.audio:
            manifest.audio_files.append(_add_audio_output(cmd, audio, output_dir))
    else:
        track = request.audio[0].track
        manifest.muxed_audio = MuxedAudio(
            language=track.language or UNKNOWN_LANGUAGE, title=track.title
        )

    for sub_track in request.subtitles:
        filename = subtitle_filename(sub_track.index, sub_track.language)
        cmd.extend(["-map", f"0:{sub_track.index}", str(output_dir / filename)])
        manifest.text_files.append(
            TextOutput(
                filename=filename,
                language=sub_track.language,
                title=sub_track.title,
            )
        )

    plan = TranscodePlan(
        command=tuple(cmd),
        manifest=manifest.build(),
        demux_audio=demux,
        output_dir=output_dir,
    )
    logger.info(
        "Planned %s: %d video, %d audio, %d subtitle outputs (demux=%s)",
        source.name,
        len(plan.manifest.video_files),
        len(plan.manifest.audio_files),
        len(plan.manifest.text_files),
        demux,
    )
    return plan


def _bitrate_args(selection: TrackSelection, stream: str) -> list[str]:
    """Bitrate flags for a re-encoded stream; none for passthrough."""
    if selection.bitrate is None or selection.is_passthrough:
        return []
    return [f"-b:{stream}", f"{selection.bitrate}k"]


def _add_video_output(
    cmd: list[str],
    video: TrackSelection,
    embedded: _EmbeddedAudio | None,
    output_dir: Path,
) -> VideoOutput:
    """Append the arguments for one video output and describe it."""
    cmd.extend(["-map", f"0:{video.track.index}"])
    audio_codec: AudioCodec | None = None

    if embedded is None:
        container = find_container_for_video(video.codec)
    elif embedded.selection is not None:
        cmd.extend(["-map", embedded.input_map])
        audio = embedded.selection
        audio_codec = audio.codec
        container = require_container_for(video.codec, audio_codec)
        if requires_experimental(container, audio_codec):
            # ffmpeg requires this per output file
            cmd.extend(["-strict", "experimental"])
    else:
        cmd.extend(["-map", embedded.input_map])
        container = find_container_for_video(video.codec)
        audio_codec = container.preferred_audio_codec

    filename = video_filename(video, container)
    cmd.extend(["-c:v", video.encoder_name])
    cmd.extend(_bitrate_args(video, "v"))
    if embedded is not None:
        if embedded.selection is not None:
            cmd.extend(["-c:a", embedded.selection.encoder_name])
            cmd.extend(_bitrate_args(embedded.selection, "a"))
            cmd.extend(embedded.selection.extra_args)
        else:
            cmd.extend(["-c:a", container.preferred_audio_encoder])
    cmd.extend(video.extra_args)
    cmd.append(str(output_dir / filename))

    return VideoOutput(
        filename=filename,
        container=container,
        video_codec=video.codec,
        height=video.track.height or 0,
        audio_codec=audio_codec,
        audio_is_silent=embedded is not None and embedded.is_silent,
    )


def _add_audio_output(
    cmd: list[str], audio: TrackSelection, output_dir: Path
) -> AudioOutput:
    """Append the arguments for one standalone audio output and describe it."""
    container = find_audio_container(audio.codec)
    filename = audio_filename(audio, container.extension)
    cmd.extend(["-map", f"0:{audio.track.index}", "-codec", audio.encoder_name])
    cmd.extend(_bitrate_args(audio, "a"))
    cmd.extend(audio.extra_args)
    cmd.extend(container.format_override)
    cmd.append(str(output_dir / filename))

    return AudioOutput(
        filename=filename,
        container=container,
        codec=audio.codec,
        language=audio.track.language or UNKNOWN_LANGUAGE,
        title=audio.track.title,
    )
