"""CLI module for vtp."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from vtp.cli.context import load_config
from vtp.logging import configure_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="video-transcode-planner")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: ~/.vtp/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """vtp - Plan and run browser-friendly transcodes with ffmpeg."""
    obj = ctx.ensure_object(dict)
    obj["config_path"] = config_path
    obj["log_level"] = log_level
    obj["log_file"] = log_file
    obj["log_format"] = "json" if log_json else None

    config = load_config(ctx)
    configure_logging(config.logging)
    logger.debug("Loaded configuration: %s", config)


# Defer import to avoid circular dependency
def _register_commands() -> None:
    from vtp.cli.demux import demux_command
    from vtp.cli.inspect import capabilities_command, probe_command
    from vtp.cli.plan import plan_command
    from vtp.cli.serve import serve_command

    main.add_command(capabilities_command)
    main.add_command(probe_command)
    main.add_command(plan_command)
    main.add_command(demux_command)
    main.add_command(serve_command)


_register_commands()
