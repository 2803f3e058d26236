"""FFmpeg stderr progress parsing.

While encoding, ffmpeg rewrites a single status line on stderr, ending each
update with a carriage return:

    frame= 1234 fps= 30 q=28.0 size= 2048kB time=00:01:23.45 bitrate=... speed=2.0x

Regular log messages (warnings, stream mapping) end with newlines and may
arrive in the same chunk ahead of a status line. The format is not stable
across ffmpeg versions, so a line that does not parse is simply skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Elapsed output time; hours may be negative for streams with odd timestamps
ELAPSED_PATTERN = re.compile(r"time=(-?[0-9]+):([0-9]{2}):([0-9]{2}\.[0-9]+)")


@dataclass(frozen=True)
class ProgressChunk:
    """One carriage-return delimited chunk of ffmpeg stderr.

    Attributes:
        output: Complete log lines preceding the status line (newline
            terminated), or None if the chunk holds only a status line.
        status: The trailing status line, without line terminators.
    """

    output: str | None
    status: str


def split_status_chunk(chunk: str) -> ProgressChunk:
    """Separate completed log lines from the trailing status line.

    Args:
        chunk: Text read from stderr up to and including a carriage return.

    Returns:
        ProgressChunk with everything up to the last newline as output.
    """
    chunk = chunk.rstrip("\r")
    head, sep, tail = chunk.rpartition("\n")
    if not sep:
        return ProgressChunk(output=None, status=tail)
    return ProgressChunk(output=head + sep, status=tail)


def parse_elapsed_seconds(line: str) -> float | None:
    """Extract the elapsed output time from a status line.

    Args:
        line: An ffmpeg status line.

    Returns:
        Elapsed time in seconds, or None if the line has no time= field.
    """
    match = ELAPSED_PATTERN.search(line)
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2))
    seconds = float(match.group(3))
    return hours * 3600 + minutes * 60 + seconds


def progress_percent(elapsed_seconds: float, duration_seconds: float) -> float:
    """Share of the source already encoded, from 0.0 to 100.0.

    Returns 0.0 when the duration is unknown.
    """
    if duration_seconds <= 0:
        return 0.0
    return max(0.0, min(100.0, elapsed_seconds / duration_seconds * 100))
