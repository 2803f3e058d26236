"""Pure parsing functions for ffprobe compact output.

ffprobe is run with `-of compact`, which prints one section per line:

    stream|index=0|codec_name=h264|codec_type=video|coded_height=1080
    stream|index=1|codec_name=aac|codec_type=audio|channels=2|tag:language=jpn
    format|duration=1420.048000|bit_rate=4127306|tag:title=Episode 1

These functions do no I/O. Unknown keys are logged and ignored; a stream
whose codec_type is not video, audio or subtitle is skipped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from vtp.domain.models import ProbeResult, Track, TrackKind

logger = logging.getLogger(__name__)

# Separator not preceded by the compact writer's escape character
_FIELD_SEPARATOR = re.compile(r"(?<!\\)\|")
_ESCAPES = {"\\|": "|", "\\\\": "\\", "\\n": "\n", "\\r": "\r", "\\t": "\t"}
_ESCAPE_PATTERN = re.compile(r"\\[|\\nrt]")

_FORMAT_KEYS = frozenset({"duration", "bit_rate", "tag:title"})
_STREAM_KEYS = frozenset(
    {
        "codec_type",
        "index",
        "channels",
        "codec_name",
        "coded_height",
        "tag:language",
        "tag:title",
    }
)


def _unescape(value: str) -> str:
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], value)


def _optional_int(value: str | None) -> int | None:
    if value is None or value in ("", "N/A"):
        return None
    try:
        return int(value)
    except ValueError:
        logger.debug("Ignoring non-integer ffprobe value %r", value)
        return None


def _optional_float(value: str | None) -> float | None:
    if value is None or value in ("", "N/A"):
        return None
    try:
        return float(value)
    except ValueError:
        logger.debug("Ignoring non-numeric ffprobe value %r", value)
        return None


def _optional_str(value: str | None) -> str | None:
    return value if value else None


def split_section(line: str) -> tuple[str, dict[str, str]]:
    """Split one compact line into its section name and fields.

    Args:
        line: A line such as "stream|index=0|codec_type=video".

    Returns:
        Tuple of (section name, field mapping).
    """
    kind, *parts = _FIELD_SEPARATOR.split(line.rstrip("\r\n"))
    fields: dict[str, str] = {}
    for part in parts:
        key, sep, value = part.partition("=")
        if not sep:
            continue
        fields[key] = _unescape(value)
    return kind, fields


def parse_stream(fields: dict[str, str], context: str = "") -> Track | None:
    """Build a Track from a stream section.

    Args:
        fields: Parsed key/value fields of the section.
        context: Source path for log messages.

    Returns:
        Track, or None when the stream is not a video, audio or subtitle
        stream, or has no index.
    """
    for key in fields.keys() - _STREAM_KEYS:
        logger.debug("Ignoring unknown stream key %s in %s", key, context)

    kind = TrackKind.parse(fields.get("codec_type", ""))
    if kind is None:
        logger.debug(
            "Skipping %s stream in %s", fields.get("codec_type", "untyped"), context
        )
        return None

    index = _optional_int(fields.get("index"))
    if index is None:
        logger.warning("Skipping stream without index in %s", context)
        return None

    height = _optional_int(fields.get("coded_height"))
    return Track(
        index=index,
        kind=kind,
        codec=fields.get("codec_name") or "unknown",
        height=height or None,
        language=_optional_str(fields.get("tag:language")),
        title=_optional_str(fields.get("tag:title")),
        channels=_optional_int(fields.get("channels")),
    )


@dataclass
class _FormatInfo:
    duration: float = 0.0
    bit_rate: int | None = None
    title: str | None = None
    unknown_keys: set[str] = field(default_factory=set)


def parse_format(fields: dict[str, str]) -> _FormatInfo:
    info = _FormatInfo(unknown_keys=set(fields.keys() - _FORMAT_KEYS))
    info.duration = _optional_float(fields.get("duration")) or 0.0
    info.bit_rate = _optional_int(fields.get("bit_rate"))
    info.title = _optional_str(fields.get("tag:title"))
    return info


def parse_compact_output(path: Path, output: str) -> ProbeResult:
    """Parse the complete ffprobe compact output for one file.

    Args:
        path: The probed file.
        output: ffprobe standard output.

    Returns:
        ProbeResult with tracks in stream order.
    """
    tracks: list[Track] = []
    info = _FormatInfo()

    for line in output.splitlines():
        if not line.strip():
            continue
        kind, fields = split_section(line)
        if kind == "stream":
            track = parse_stream(fields, context=str(path))
            if track is not None:
                tracks.append(track)
        elif kind == "format":
            info = parse_format(fields)
            for key in info.unknown_keys:
                logger.debug("Ignoring unknown format key %s in %s", key, path)
        else:
            logger.debug("Ignoring ffprobe section %r for %s", kind, path)

    tracks.sort(key=lambda t: t.index)
    return ProbeResult(
        path=path,
        duration=info.duration,
        tracks=tuple(tracks),
        bit_rate=info.bit_rate,
        title=info.title,
    )
