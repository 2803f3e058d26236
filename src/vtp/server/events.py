"""Server-Sent Events (SSE) handlers.

Endpoints:
    GET /api/events/status - Worker status: idle, or working on a job
    GET /api/events/progress - Elapsed output seconds of the running job
    GET /api/events/output?slug= - ffmpeg output of a job, replayed from
        the start; defaults to the running job

Status and progress streams send the current value on connect and then
each change; a slow client only receives the latest value. Idle streams
send a heartbeat event every SSE_HEARTBEAT_INTERVAL seconds.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from aiohttp import web

from vtp.exceptions import JobNotFoundError
from vtp.jobs.service import TranscodeService
from vtp.jobs.status import LatestValue, OutputLog
from vtp.server.errors import NOT_FOUND, api_error, error_response

logger = logging.getLogger(__name__)

T = TypeVar("T")

SSE_HEARTBEAT_INTERVAL = 15  # seconds
SSE_WRITE_TIMEOUT = 5.0  # seconds - timeout for writing to slow clients

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


async def _write_sse_event(
    response: web.StreamResponse,
    event_type: str,
    data: dict[str, Any],
    timeout: float = SSE_WRITE_TIMEOUT,
) -> bool:
    """Write an SSE event to the response stream.

    Args:
        response: The streaming response object.
        event_type: Event type name (e.g., 'status', 'heartbeat').
        data: Event data to JSON-serialize.
        timeout: Write timeout in seconds.

    Returns:
        True if write succeeded, False if connection was closed or timed out.
    """
    payload = f"event: {event_type}\ndata: {json.dumps(data)}\n\n"
    try:
        await asyncio.wait_for(
            response.write(payload.encode("utf-8")),
            timeout=timeout,
        )
        return True
    except asyncio.TimeoutError:
        logger.warning("SSE write timeout - slow client")
        return False
    except (ConnectionResetError, ConnectionAbortedError, BrokenPipeError):
        logger.debug("SSE client disconnected")
        return False


async def _heartbeat(response: web.StreamResponse) -> bool:
    return await _write_sse_event(
        response,
        "heartbeat",
        {"timestamp": datetime.now(timezone.utc).isoformat()},
    )


async def _prepare(request: web.Request) -> web.StreamResponse:
    response = web.StreamResponse(status=200, headers=SSE_HEADERS)
    await response.prepare(request)
    return response


async def _stream_latest(
    request: web.Request,
    channel: LatestValue[T],
    event_type: str,
    to_data: Callable[[T], dict[str, Any]],
) -> web.StreamResponse:
    """Stream a LatestValue channel until the client goes away."""
    response = await _prepare(request)
    version = channel.version
    if not await _write_sse_event(response, event_type, to_data(channel.value)):
        return response

    while True:
        try:
            value = await asyncio.wait_for(
                channel.wait_for_change(version), timeout=SSE_HEARTBEAT_INTERVAL
            )
        except asyncio.TimeoutError:
            if not await _heartbeat(response):
                break
            continue
        version = channel.version
        if not await _write_sse_event(response, event_type, to_data(value)):
            break
    return response


async def sse_status_handler(request: web.Request) -> web.StreamResponse:
    """Handle GET /api/events/status."""
    service: TranscodeService = request.app["service"]
    return await _stream_latest(
        request, service.worker.status, "status", lambda status: status.to_dict()
    )


async def sse_progress_handler(request: web.Request) -> web.StreamResponse:
    """Handle GET /api/events/progress."""
    service: TranscodeService = request.app["service"]
    return await _stream_latest(
        request,
        service.worker.progress,
        "progress",
        lambda elapsed: {"elapsed": elapsed},
    )


async def sse_output_handler(request: web.Request) -> web.StreamResponse:
    """Handle GET /api/events/output - replay and follow a job's ffmpeg log.

    Query parameters:
        slug: Job to follow. Defaults to the running job.

    Sends one 'output' event per chunk of log text and a final 'close'
    event when the job finishes.
    """
    service: TranscodeService = request.app["service"]
    slug = request.query.get("slug") or service.status.slug
    if slug is None:
        return api_error("No job is running", code=NOT_FOUND, status=404)
    try:
        log: OutputLog = service.get_job(slug).output
    except JobNotFoundError as e:
        return error_response(e)

    response = await _prepare(request)
    position = 0
    while True:
        for chunk in log.chunks_since(position):
            position += 1
            if not await _write_sse_event(response, "output", {"text": chunk}):
                return response
        if log.closed and position >= len(log):
            await _write_sse_event(response, "close", {"reason": "finished"})
            break
        try:
            await asyncio.wait_for(
                log.wait_beyond(position), timeout=SSE_HEARTBEAT_INTERVAL
            )
        except asyncio.TimeoutError:
            if not await _heartbeat(response):
                break
    return response


def setup_event_routes(app: web.Application) -> None:
    app.router.add_get("/api/events/status", sse_status_handler)
    app.router.add_get("/api/events/progress", sse_progress_handler)
    app.router.add_get("/api/events/output", sse_output_handler)
