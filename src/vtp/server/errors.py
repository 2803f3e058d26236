"""JSON error bodies for the API.

Every failed request answers with ``{"error": message, "code": CODE}`` and,
for validation failures, a ``details`` list. Codes are stable strings that
clients may switch on; messages are for people.
"""

from __future__ import annotations

import logging
from typing import Any

from aiohttp import web

from vtp.exceptions import (
    CapabilityProbeError,
    DuplicateJobError,
    InvalidPathError,
    JobNotFoundError,
    PlanningError,
    SourceNotFoundError,
    SourceProbeError,
    TranscodeError,
)

logger = logging.getLogger(__name__)

INVALID_JSON = "INVALID_JSON"
INVALID_PATH = "INVALID_PATH"
NOT_FOUND = "NOT_FOUND"
VALIDATION_FAILED = "VALIDATION_FAILED"
PLANNING_FAILED = "PLANNING_FAILED"
PROBE_FAILED = "PROBE_FAILED"
JOB_EXISTS = "JOB_EXISTS"
SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

# Most specific first; the first matching class wins
_ERROR_STATUS: tuple[tuple[type[TranscodeError], str, int], ...] = (
    (InvalidPathError, INVALID_PATH, 400),
    (SourceNotFoundError, NOT_FOUND, 404),
    (JobNotFoundError, NOT_FOUND, 404),
    (SourceProbeError, PROBE_FAILED, 422),
    (DuplicateJobError, JOB_EXISTS, 409),
    (PlanningError, PLANNING_FAILED, 400),
    (CapabilityProbeError, SERVICE_UNAVAILABLE, 503),
)


def api_error(
    message: str,
    *,
    code: str,
    status: int = 400,
    details: Any = None,
) -> web.Response:
    """Build a JSON error response."""
    body: dict[str, Any] = {"error": message, "code": code}
    if details is not None:
        body["details"] = details
    return web.json_response(body, status=status)


def error_response(error: TranscodeError) -> web.Response:
    """Translate a domain error into its API response.

    A missing source file is reported by name only, so responses do not
    reveal where the media directory lives.

    Raises:
        TranscodeError: The error itself, when it has no API mapping.
    """
    for error_type, code, status in _ERROR_STATUS:
        if not isinstance(error, error_type):
            continue
        if status >= 500:
            logger.error("%s", error)
        if isinstance(error, SourceNotFoundError):
            return api_error(f"No such file: {error.path.name}", code=code, status=404)
        return api_error(str(error), code=code, status=status)
    raise error
