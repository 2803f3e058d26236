"""Exit codes for vtp CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, request)
    20-29: Source file errors
    30-39: Tool errors
    40-49: Transcode errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for vtp CLI commands."""

    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    CONFIG_ERROR = 11
    PLANNING_ERROR = 12

    # Source file errors (20-29)
    TARGET_NOT_FOUND = 20
    PROBE_FAILED = 21
    MANIFEST_ERROR = 22

    # Tool errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Transcode errors (40-49)
    TRANSCODE_FAILED = 40
