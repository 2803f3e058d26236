"""SourceProber interface for probing source media files."""

from pathlib import Path
from typing import Protocol

from vtp.domain.models import ProbeResult


class SourceProber(Protocol):
    """Protocol for source probing implementations.

    The job service and CLI depend on this protocol so tests can supply a
    prober that does not spawn ffprobe.
    """

    def probe(self, path: Path) -> ProbeResult:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            ProbeResult describing the file's tracks.

        Raises:
            SourceNotFoundError: If the file does not exist.
            SourceProbeError: If the file cannot be probed.
        """
        ...
