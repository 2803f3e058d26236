"""HTTP application for `vtp serve`.

The application owns a TranscodeService. Its worker task is started when
the server starts and cancelled on cleanup, which kills any running ffmpeg
process; queued jobs are dropped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from aiohttp import web

from vtp.config.models import AppConfig
from vtp.introspector.cache import CachingProber
from vtp.introspector.ffprobe import FFprobeIntrospector
from vtp.jobs.service import TranscodeService
from vtp.server.events import setup_event_routes
from vtp.server.routes import setup_api_routes
from vtp.tools.registry import CapabilityRegistry

logger = logging.getLogger(__name__)


def create_service(config: AppConfig) -> TranscodeService:
    """Build a TranscodeService from configuration."""
    prober = CachingProber(
        FFprobeIntrospector(config.tools.ffprobe),
        capacity=config.jobs.probe_cache_size,
    )
    return TranscodeService(
        prober,
        CapabilityRegistry(config.tools.ffmpeg),
        config.paths.output_dir,
        ffmpeg_path=config.tools.ffmpeg,
        url_prefix=config.paths.url_prefix,
    )


async def _start_worker(app: web.Application) -> None:
    service: TranscodeService = app["service"]
    service.start()
    logger.debug("Started transcode worker task")


async def _stop_worker(app: web.Application) -> None:
    service: TranscodeService = app["service"]
    await service.stop()
    logger.debug("Stopped transcode worker task")


def create_app(service: TranscodeService, media_dir: Path) -> web.Application:
    """Create and configure the aiohttp Application.

    Args:
        service: Service that plans and runs jobs.
        media_dir: Directory that request paths are resolved under.

    Returns:
        Configured aiohttp Application instance.
    """
    app = web.Application()
    app["service"] = service
    app["media_dir"] = media_dir

    setup_api_routes(app)
    setup_event_routes(app)

    app.on_startup.append(_start_worker)
    app.on_cleanup.append(_stop_worker)
    return app
