"""FFprobe-based implementation of the SourceProber protocol."""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from vtp.core.subprocess_utils import run_command
from vtp.domain.models import ProbeResult
from vtp.exceptions import SourceNotFoundError, SourceProbeError
from vtp.introspector.parsers import parse_compact_output

logger = logging.getLogger(__name__)

# Timeout for a single probe
PROBE_TIMEOUT = 60

# Only the fields the planner needs
SHOW_ENTRIES = (
    "stream_tags=title,language"
    ":stream=index,codec_type,codec_name,channels,coded_height"
    ":stream_disposition="
    ":format=duration,bit_rate"
    ":format_tags=title"
)


def build_probe_command(ffprobe_path: str, path: Path) -> list[str]:
    return [
        ffprobe_path,
        "-of",
        "compact",
        "-hide_banner",
        "-show_streams",
        "-show_format",
        "-show_entries",
        SHOW_ENTRIES,
        str(path),
    ]


class FFprobeIntrospector:
    """Probes source files with ffprobe's compact output format."""

    def __init__(self, ffprobe_path: str = "ffprobe") -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: ffprobe executable to invoke.
        """
        self._ffprobe_path = ffprobe_path

    def probe(self, path: Path) -> ProbeResult:
        """Probe a source file.

        Args:
            path: Path to the media file.

        Returns:
            ProbeResult describing its tracks.

        Raises:
            SourceNotFoundError: If the file does not exist.
            SourceProbeError: If ffprobe fails or cannot be run.
        """
        if not path.is_file():
            raise SourceNotFoundError(path)

        try:
            stdout, stderr, rc = run_command(
                build_probe_command(self._ffprobe_path, path), timeout=PROBE_TIMEOUT
            )
        except FileNotFoundError as e:
            raise SourceProbeError(path, f"{self._ffprobe_path} not found") from e
        except subprocess.TimeoutExpired as e:
            raise SourceProbeError(path, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise SourceProbeError(path, str(e)) from e

        if rc != 0:
            # The file may have vanished between the check and the probe
            if not path.exists():
                raise SourceNotFoundError(path)
            raise SourceProbeError(path, stderr.strip() or f"exit code {rc}")

        result = parse_compact_output(path, stdout)
        logger.debug(
            "Probed %s: %d tracks, %.1fs", path, len(result.tracks), result.duration
        )
        return result
