"""`vtp serve` command: run the HTTP API and job worker."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from pathlib import Path

import click
from aiohttp import web

from vtp.cli.context import load_config
from vtp.cli.exit_codes import ExitCode
from vtp.config.models import AppConfig
from vtp.exceptions import CapabilityProbeError
from vtp.logging import configure_logging
from vtp.server.app import create_app, create_service

logger = logging.getLogger(__name__)


async def run_server(config: AppConfig) -> int:
    """Run the server until SIGINT or SIGTERM.

    Returns:
        Exit code (0 for clean shutdown, non-zero for errors).
    """
    service = create_service(config)
    try:
        # Nothing can be planned without the encoder list; fail at startup
        capabilities = await asyncio.to_thread(service.capabilities.load)
    except CapabilityProbeError as e:
        logger.error("%s", e)
        return ExitCode.TOOL_NOT_AVAILABLE
    logger.info(
        "ffmpeg can encode %d video and %d audio codecs",
        len(capabilities.video),
        len(capabilities.audio),
    )

    app = create_app(service, config.paths.media_dir)
    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown_event.set)

    runner = web.AppRunner(app)
    await runner.setup()
    bind, port = config.server.bind, config.server.port
    try:
        site = web.TCPSite(runner, bind, port)
        await site.start()
        logger.info(
            "vtp server started on http://%s:%d (PID %d)", bind, port, os.getpid()
        )
        logger.info("Media directory: %s", config.paths.media_dir)
        logger.info("Output directory: %s", config.paths.output_dir)
        await shutdown_event.wait()
        logger.info("Shutdown initiated")
    except OSError as e:
        logger.error("Cannot listen on %s:%d: %s", bind, port, e)
        return ExitCode.GENERAL_ERROR
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await runner.cleanup()
        logger.info("vtp server stopped")
    return ExitCode.SUCCESS


@click.command("serve")
@click.option("--bind", type=str, default=None, help="Address to bind to.")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to.")
@click.option(
    "--media-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory source paths are resolved under.",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Parent directory of job output directories.",
)
@click.option(
    "--url-prefix",
    default=None,
    help="Public URL of the output directory, for descriptor.json.",
)
@click.pass_context
def serve_command(
    ctx: click.Context,
    bind: str | None,
    port: int | None,
    media_dir: Path | None,
    output_dir: Path | None,
    url_prefix: str | None,
) -> None:
    """Run the HTTP API and the transcode worker.

    Configuration precedence (highest to lowest):
      1. CLI flags
      2. Environment variables (VTP_*)
      3. Config file (--config or ~/.vtp/config.toml)
      4. Default values

    \b
    Examples:
        vtp serve --media-dir /srv/media --output-dir /srv/www/transcodes
        vtp serve --port 9000 --url-prefix https://example.org/transcodes/
    """
    config = load_config(
        ctx,
        bind=bind,
        port=port,
        media_dir=media_dir,
        output_dir=output_dir,
        url_prefix=url_prefix,
    )
    # Always log to stderr when running as a service
    config.logging.include_stderr = True
    configure_logging(config.logging)

    config.paths.output_dir.mkdir(parents=True, exist_ok=True)
    try:
        exit_code = asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Interrupted before server started")
        sys.exit(ExitCode.INTERRUPTED)
    sys.exit(exit_code)
