"""Default track selection for a probed source file.

Used by the CLI and offered to clients as a starting point. The defaults
avoid re-encoding wherever the platform can play the source codecs:

- the first video track, passed through when its codec is playable, else
  encoded to AV1
- one audio track per language, preferring tracks that need no re-encoding
  and then more channels
- every text subtitle track (bitmap subtitles would need OCR)
"""

from __future__ import annotations

import logging
from pathlib import Path

from vtp.core.codecs import AudioCodec, VideoCodec, is_bitmap_subtitle
from vtp.core.containers import (
    VideoContainer,
    find_container_for,
    find_container_for_video,
)
from vtp.domain.models import (
    COPY_ENCODER,
    ProbeResult,
    Track,
    TrackKind,
    TrackSelection,
    TranscodeRequest,
)

logger = logging.getLogger(__name__)

# Fallback when the source video codec cannot be played as is
FALLBACK_VIDEO_CODEC = VideoCodec.AV1
FALLBACK_VIDEO_ENCODER = "libsvtav1"

_PLAYABLE_SCORE = 100


def _default_video(tracks: list[Track]) -> TrackSelection | None:
    if not tracks:
        return None
    track = tracks[0]
    codec = VideoCodec.parse(track.codec)
    if codec is not None:
        return TrackSelection(track=track, codec=codec, encoder=COPY_ENCODER)
    return TrackSelection(
        track=track, codec=FALLBACK_VIDEO_CODEC, encoder=FALLBACK_VIDEO_ENCODER
    )


def _audio_score(track: Track, video_codec: VideoCodec | None, single: bool) -> int:
    """Rank an audio track; higher is better."""
    score = track.channels or 0
    codec = AudioCodec.parse(track.codec)
    if codec is None:
        return score
    score += _PLAYABLE_SCORE
    # With a single language the track will be muxed, so prefer one that
    # fits in the same container as the video
    if single and video_codec is not None:
        if find_container_for(video_codec, codec) is not None:
            score += _PLAYABLE_SCORE
    return score


def _audio_selection(track: Track, video_codec: VideoCodec | None) -> TrackSelection:
    codec = AudioCodec.parse(track.codec)
    if codec is not None:
        return TrackSelection(track=track, codec=codec, encoder=COPY_ENCODER)
    if video_codec is None:
        container = VideoContainer.MP4
    else:
        container = find_container_for_video(video_codec)
    return TrackSelection(
        track=track,
        codec=container.preferred_audio_codec,
        encoder=container.preferred_audio_encoder,
    )


def default_request(
    probe: ProbeResult, title: str | None = None
) -> TranscodeRequest:
    """Build the default TranscodeRequest for a probed file.

    Args:
        probe: Probe result of the source.
        title: Display title; defaults to the container title, then the
            file name without extension.

    Returns:
        TranscodeRequest with default selections and no policy flags set.
    """
    video = _default_video(probe.tracks_of_kind(TrackKind.VIDEO))
    video_codec = video.codec if video is not None else None

    by_language: dict[str, list[Track]] = {}
    for track in probe.tracks_of_kind(TrackKind.AUDIO):
        by_language.setdefault(track.language or "", []).append(track)
    single = len(by_language) == 1

    audio = tuple(
        _audio_selection(
            max(group, key=lambda t: _audio_score(t, video_codec, single)),
            video_codec,
        )
        for group in by_language.values()
    )

    subtitles = tuple(
        t
        for t in probe.tracks_of_kind(TrackKind.SUBTITLE)
        if not is_bitmap_subtitle(t.codec)
    )

    request = TranscodeRequest(
        title=title or probe.title or Path(probe.path).stem,
        duration=probe.duration,
        video=(video,) if video is not None else (),
        audio=audio,
        subtitles=subtitles,
    )
    logger.debug(
        "Default selection for %s: %d video, %d audio, %d subtitle tracks",
        probe.path,
        len(request.video),
        len(request.audio),
        len(request.subtitles),
    )
    return request
