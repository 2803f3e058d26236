"""Source file probing with ffprobe."""

from vtp.introspector.cache import CachingProber
from vtp.introspector.ffprobe import FFprobeIntrospector
from vtp.introspector.interface import SourceProber
from vtp.introspector.parsers import parse_compact_output

__all__ = [
    "CachingProber",
    "FFprobeIntrospector",
    "SourceProber",
    "parse_compact_output",
]
