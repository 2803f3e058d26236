"""Bounded in-memory cache of probe results.

Probing the same file twice (once to show its tracks, again when the job is
submitted) is common, so results are kept keyed by path. Two concurrent
misses on the same path may both run ffprobe; the last result stored wins.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from pathlib import Path

from vtp.domain.models import ProbeResult
from vtp.introspector.interface import SourceProber

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 30


class CachingProber:
    """SourceProber wrapper with least-recently-used eviction."""

    def __init__(self, prober: SourceProber, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize the cache.

        Args:
            prober: Prober used on cache misses.
            capacity: Maximum number of results kept.

        Raises:
            ValueError: If capacity is less than 1.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._prober = prober
        self._capacity = capacity
        self._entries: OrderedDict[Path, ProbeResult] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def probe(self, path: Path) -> ProbeResult:
        """Return the cached result for path, probing on a miss.

        Failed probes are not cached.
        """
        with self._lock:
            cached = self._entries.get(path)
            if cached is not None:
                self._entries.move_to_end(path)
                return cached

        # Probe outside the lock so other paths are not blocked
        result = self._prober.probe(path)

        with self._lock:
            self._entries[path] = result
            self._entries.move_to_end(path)
            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted probe result for %s", evicted)
        return result

    def invalidate(self, path: Path) -> None:
        with self._lock:
            self._entries.pop(path, None)
