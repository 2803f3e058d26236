"""JSON API handlers.

Endpoints:
    GET /health - Liveness and worker state
    GET /api/capabilities - Codecs and encoders ffmpeg supports
    GET /api/files?dir= - List a directory under the media directory
    GET /api/probe?path= - Probe a source file and suggest default selections
    POST /api/jobs?path= - Submit a transcode job; returns its queue position
    GET /api/queue - Running job and queued job slugs

Paths are relative to the media directory. Planning errors are reported
with status 400 before anything is queued; a source that does not exist
is 404.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from aiohttp import web
from pydantic import ValidationError

from vtp import __version__
from vtp.core.paths import resolve_within
from vtp.exceptions import (
    CapabilityProbeError,
    InvalidPathError,
    PlanningError,
    SourceProbeError,
)
from vtp.jobs.service import TranscodeService
from vtp.planning.defaults import default_request
from vtp.planning.request import JobSubmissionModel, TranscodeRequestModel
from vtp.server.errors import (
    INVALID_JSON,
    NOT_FOUND,
    VALIDATION_FAILED,
    api_error,
    error_response,
)

logger = logging.getLogger(__name__)


def _source_path(request: web.Request, param: str = "path") -> Path:
    """Resolve a query parameter to a path under the media directory.

    Raises:
        InvalidPathError: If the parameter is missing or escapes the media
            directory.
    """
    media_dir: Path = request.app["media_dir"]
    return resolve_within(media_dir, request.query.get(param, ""))


async def health_handler(request: web.Request) -> web.Response:
    """Handle GET /health.

    Returns 200 while the worker task is running, 503 otherwise.
    """
    service: TranscodeService = request.app["service"]
    healthy = service.is_running
    body = {
        "status": "healthy" if healthy else "degraded",
        "version": __version__,
        "worker": service.status.to_dict(),
        "jobs_queued": len(service.queue),
    }
    return web.json_response(body, status=200 if healthy else 503)


async def capabilities_handler(request: web.Request) -> web.Response:
    """Handle GET /api/capabilities."""
    service: TranscodeService = request.app["service"]
    try:
        capabilities = await asyncio.to_thread(service.capabilities.get)
    except CapabilityProbeError as e:
        return error_response(e)
    return web.json_response(capabilities.to_dict())


def _list_directory(directory: Path, media_dir: Path) -> list[dict[str, Any]]:
    entries = []
    for entry in directory.iterdir():
        if entry.name.startswith("."):
            continue
        is_dir = entry.is_dir()
        entries.append(
            {
                "name": entry.name,
                "path": entry.relative_to(media_dir).as_posix(),
                "is_dir": is_dir,
                "size": None if is_dir else entry.stat().st_size,
            }
        )
    entries.sort(key=lambda e: (not e["is_dir"], e["name"].casefold()))
    return entries


async def files_handler(request: web.Request) -> web.Response:
    """Handle GET /api/files - list a directory under the media directory.

    Query parameters:
        dir: Directory relative to the media directory (default: root).
    """
    media_dir: Path = request.app["media_dir"]
    requested = request.query.get("dir", "")
    try:
        directory = resolve_within(media_dir, requested) if requested else media_dir
    except InvalidPathError as e:
        return error_response(e)
    if not directory.is_dir():
        return api_error(f"No such directory: {requested}", code=NOT_FOUND, status=404)

    entries = await asyncio.to_thread(_list_directory, directory, media_dir)
    return web.json_response({"dir": requested, "entries": entries})


async def probe_handler(request: web.Request) -> web.Response:
    """Handle GET /api/probe - probe a source and suggest default selections.

    Query parameters:
        path: Source file relative to the media directory.

    Returns:
        JSON with the probe result under ``probe`` and a default request in
        submission format under ``defaults``.
    """
    service: TranscodeService = request.app["service"]
    try:
        source = _source_path(request)
        probe = await asyncio.to_thread(service.probe, source)
    except (InvalidPathError, SourceProbeError) as e:
        return error_response(e)

    defaults = TranscodeRequestModel.from_request(default_request(probe))
    return web.json_response(
        {
            "probe": probe.to_dict(),
            "defaults": defaults.model_dump(mode="json"),
        }
    )


async def submit_job_handler(request: web.Request) -> web.Response:
    """Handle POST /api/jobs - plan a job and queue it.

    Query parameters:
        path: Source file relative to the media directory.

    The body is a transcode request plus a ``slug`` naming the output
    directory. The manifest files are written before the job is queued.

    Returns:
        202 with ``{"slug": ..., "position": ...}``; position is 1-based.
    """
    service: TranscodeService = request.app["service"]
    try:
        source = _source_path(request)
    except InvalidPathError as e:
        return error_response(e)

    try:
        body = await request.json()
    except json.JSONDecodeError:
        return api_error("Invalid JSON body", code=INVALID_JSON)

    try:
        submission = JobSubmissionModel.model_validate(body)
    except ValidationError as e:
        return api_error(
            "Invalid transcode request",
            code=VALIDATION_FAILED,
            details=json.loads(e.json(include_url=False)),
        )

    try:
        position = await service.submit(source, submission, submission.slug)
    except PlanningError as e:
        logger.info("Rejected job %s: %s", submission.slug, e)
        return error_response(e)
    except (InvalidPathError, SourceProbeError, CapabilityProbeError) as e:
        return error_response(e)

    return web.json_response(
        {"slug": submission.slug, "position": position}, status=202
    )


async def queue_handler(request: web.Request) -> web.Response:
    """Handle GET /api/queue."""
    service: TranscodeService = request.app["service"]
    return web.json_response(
        {
            "current": service.status.to_dict(),
            "queued": await service.list_queue(),
        }
    )


def setup_api_routes(app: web.Application) -> None:
    app.router.add_get("/health", health_handler)
    app.router.add_get("/api/capabilities", capabilities_handler)
    app.router.add_get("/api/files", files_handler)
    app.router.add_get("/api/probe", probe_handler)
    app.router.add_post("/api/jobs", submit_job_handler)
    app.router.add_get("/api/queue", queue_handler)
