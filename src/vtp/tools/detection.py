"""Query ffmpeg for the codecs it can encode.

`ffmpeg -hide_banner -codecs` prints one line per codec:

     DEV.LS h264     H.264 / AVC (decoders: h264) (encoders: libx264 libx264rgb)

The third character is "E" when the codec can be encoded, and the codec name
starts at column 8. Named encoders, if any, follow in parentheses.
"""

from __future__ import annotations

import logging
import re
import subprocess  # nosec B404 - only used for TimeoutExpired

from vtp.core.codecs import AudioCodec, VideoCodec
from vtp.core.subprocess_utils import run_command
from vtp.exceptions import CapabilityProbeError
from vtp.tools.models import Capabilities, CodecCapability

logger = logging.getLogger(__name__)

# Timeout for the codec listing
DETECTION_TIMEOUT = 10

_ENCODE_FLAG_COLUMN = 2
_NAME_COLUMN = 8
_ENCODERS_PATTERN = re.compile(r"\(encoders:([^)]*)\)")


def parse_encoders(line: str) -> tuple[str, ...]:
    """Extract the named encoders from a codec listing line."""
    match = _ENCODERS_PATTERN.search(line)
    if not match:
        return ()
    return tuple(match.group(1).split())


def parse_codec_listing(output: str) -> Capabilities:
    """Parse `ffmpeg -codecs` output into encodable codecs.

    Lines that cannot encode, and codec names the planner does not know,
    are skipped.

    Args:
        output: Standard output of `ffmpeg -hide_banner -codecs`.

    Returns:
        Capabilities listing video and audio codecs in output order.
    """
    video: list[CodecCapability] = []
    audio: list[CodecCapability] = []

    for line in output.splitlines():
        if len(line) <= _NAME_COLUMN or line[_ENCODE_FLAG_COLUMN] != "E":
            continue
        name = line[_NAME_COLUMN:].split(" ", 1)[0]
        if not name:
            continue

        video_codec = VideoCodec.parse(name)
        if video_codec is not None:
            video.append(CodecCapability(video_codec, parse_encoders(line)))
            continue
        audio_codec = AudioCodec.parse(name)
        if audio_codec is not None:
            audio.append(CodecCapability(audio_codec, parse_encoders(line)))

    return Capabilities(video=tuple(video), audio=tuple(audio))


def probe_capabilities(ffmpeg_path: str = "ffmpeg") -> Capabilities:
    """Run ffmpeg and parse its codec listing.

    Args:
        ffmpeg_path: ffmpeg executable.

    Returns:
        Parsed Capabilities.

    Raises:
        CapabilityProbeError: If ffmpeg cannot be run or exits non-zero.
    """
    try:
        stdout, stderr, rc = run_command(
            [ffmpeg_path, "-hide_banner", "-codecs"], timeout=DETECTION_TIMEOUT
        )
    except FileNotFoundError as e:
        raise CapabilityProbeError(ffmpeg_path, "executable not found") from e
    except subprocess.TimeoutExpired as e:
        raise CapabilityProbeError(ffmpeg_path, "timed out") from e
    except OSError as e:
        raise CapabilityProbeError(ffmpeg_path, str(e)) from e

    if rc != 0:
        raise CapabilityProbeError(
            ffmpeg_path, f"exit code {rc}: {stderr.strip()[:200]}"
        )

    capabilities = parse_codec_listing(stdout)
    logger.info(
        "ffmpeg can encode %d video and %d audio codecs",
        len(capabilities.video),
        len(capabilities.audio),
    )
    return capabilities
