"""Process-lifetime holder for ffmpeg capabilities.

The codec listing is queried once and never changes afterwards. The
registry is owned by whoever builds the service (CLI or server) and passed
to the components that need it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from vtp.tools.detection import probe_capabilities
from vtp.tools.models import Capabilities

logger = logging.getLogger(__name__)


class CapabilityRegistry:
    """Lazily probes ffmpeg once and caches the result.

    Example:
        registry = CapabilityRegistry("ffmpeg")
        registry.load()  # fail fast at startup
        caps = registry.get()
    """

    def __init__(
        self,
        ffmpeg_path: str = "ffmpeg",
        probe: Callable[[str], Capabilities] = probe_capabilities,
    ) -> None:
        """Initialize the registry.

        Args:
            ffmpeg_path: ffmpeg executable to query.
            probe: Function that queries ffmpeg. Injected by tests.
        """
        self._ffmpeg_path = ffmpeg_path
        self._probe = probe
        self._capabilities: Capabilities | None = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._capabilities is not None

    def get(self) -> Capabilities:
        """Return the capabilities, probing ffmpeg on first use.

        Raises:
            CapabilityProbeError: If the first probe fails.
        """
        if self._capabilities is not None:
            return self._capabilities
        with self._lock:
            if self._capabilities is None:
                self._capabilities = self._probe(self._ffmpeg_path)
            return self._capabilities

    def load(self) -> Capabilities:
        """Probe eagerly; call at startup so failures abort early."""
        capabilities = self.get()
        logger.debug("Capabilities loaded from %s", self._ffmpeg_path)
        return capabilities
