"""Subprocess utilities for ffmpeg and ffprobe invocation.

Both the capability probe and the source probe run short-lived tools whose
whole output is captured. Long-running transcodes are launched by the job
worker with asyncio instead.
"""

from __future__ import annotations

import logging
import shlex
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import time
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def format_command(args: Sequence[str | Path]) -> str:
    """Render an argument list as a copy-pastable shell command."""
    return shlex.join(str(arg) for arg in args)


def run_command(
    args: Sequence[str | Path],
    timeout: int | None = 60,
) -> tuple[str, str, int]:
    """Run an external tool and capture its output as text.

    Output is decoded as UTF-8 with replacement so that odd track titles
    never break parsing.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds, or None to wait indefinitely.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        FileNotFoundError: If the executable does not exist.
        subprocess.TimeoutExpired: If the command times out.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        format_command(str_args),
        extra={"command": command_name},
    )
    start_time = time.monotonic()

    try:
        result = subprocess.run(  # nosec B603 - args are built internally
            str_args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "Command timed out after %ds: %s",
            timeout,
            command_name,
            extra={"command": command_name, "timeout_seconds": timeout},
        )
        raise

    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(time.monotonic() - start_time, 3),
            "returncode": result.returncode,
        },
    )
    return result.stdout or "", result.stderr or "", result.returncode
