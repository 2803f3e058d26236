"""Follow-up plan that splits embedded audio out of finished video files.

Works from a stored manifest instead of re-probing. Assumes the manifest
came from a single planning pass: each video output holds one video stream
and at most one embedded audio stream, and all embedded (non-silent) audio
is the same source track.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from vtp.core.codecs import AudioCodec
from vtp.core.containers import find_audio_container, find_container_for_video
from vtp.manifest.models import (
    UNKNOWN_LANGUAGE,
    AudioOutput,
    Manifest,
    VideoOutput,
)

logger = logging.getLogger(__name__)

# Higher ranks are extracted first; lossless beats lossy
AUDIO_EXTRACTION_RANK: dict[AudioCodec, int] = {
    AudioCodec.FLAC: 2,
    AudioCodec.ALAC: 2,
    AudioCodec.OPUS: 1,
    AudioCodec.AAC: 1,
    AudioCodec.VORBIS: 0,
    AudioCodec.MP3: 0,
}

DEMUXED_AUDIO_STEM = "demuxed"


def select_extraction_source(manifest: Manifest) -> int | None:
    """Pick the video output whose embedded audio should be extracted.

    Args:
        manifest: Manifest of a finished transcode.

    Returns:
        Index into manifest.video_files of the output with the best ranked
        embedded audio, the last one on ties. None if no output embeds
        source audio.
    """
    candidates = [
        (i, v) for i, v in enumerate(manifest.video_files) if v.has_source_audio
    ]
    if not candidates:
        return None
    best_index, _ = max(
        candidates,
        key=lambda item: (AUDIO_EXTRACTION_RANK[item[1].audio_codec], item[0]),
    )
    return best_index


def demuxed_video_filename(output: VideoOutput) -> str:
    """New filename for a video output once its audio is dropped."""
    stem = output.filename.rsplit(".", 1)[0]
    container = find_container_for_video(output.video_codec)
    return f"{stem}_demuxed.{container.extension}"


def build_demux_commands(
    manifest: Manifest,
    output_dir: Path,
    ffmpeg_path: str = "ffmpeg",
) -> tuple[list[list[str]], Manifest]:
    """Plan the commands that move embedded audio into its own file.

    Every video output with embedded source audio is copied to a new file
    without audio. The command for the best ranked output also extracts its
    audio stream into a standalone file, labelled with the manifest's
    recorded muxed-audio language and title.

    Args:
        manifest: Manifest of a finished transcode.
        output_dir: Directory holding the output files.
        ffmpeg_path: ffmpeg executable to invoke.

    Returns:
        Tuple of (commands, updated manifest). When no output embeds source
        audio the command list is empty and the manifest is returned as is.
    """
    best_index = select_extraction_source(manifest)
    if best_index is None:
        logger.debug("No embedded audio to extract for %s", manifest.title)
        return [], manifest

    best = manifest.video_files[best_index]
    audio_codec = best.audio_codec
    audio_container = find_audio_container(audio_codec)
    muxed = manifest.muxed_audio
    audio_output = AudioOutput(
        filename=f"{DEMUXED_AUDIO_STEM}.{audio_container.extension}",
        container=audio_container,
        codec=audio_codec,
        language=muxed.language if muxed else UNKNOWN_LANGUAGE,
        title=muxed.title if muxed else None,
    )

    commands: list[list[str]] = []
    video_files: list[VideoOutput] = []
    for i, video in enumerate(manifest.video_files):
        if not video.has_source_audio:
            video_files.append(video)
            continue

        new_name = demuxed_video_filename(video)
        cmd = [
            ffmpeg_path,
            "-i",
            str(output_dir / video.filename),
            "-an",
            "-c:v",
            "copy",
            str(output_dir / new_name),
        ]
        if i == best_index:
            cmd.extend(["-vn", "-c:a", "copy", *audio_container.format_override])
            cmd.append(str(output_dir / audio_output.filename))
        commands.append(cmd)

        video_files.append(
            replace(
                video,
                filename=new_name,
                container=find_container_for_video(video.video_codec),
                audio_codec=None,
            )
        )

    logger.info(
        "Planned demux of %d video outputs, extracting %s audio from %s",
        len(commands),
        audio_codec,
        best.filename,
    )
    updated = replace(
        manifest,
        video_files=tuple(video_files),
        audio_files=(*manifest.audio_files, audio_output),
        muxed_audio=None,
    )
    return commands, updated
