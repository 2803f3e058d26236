"""Shared CLI helpers: configuration and output URLs for a command."""

from __future__ import annotations

import logging
import sys
import tomllib
from pathlib import Path
from typing import Any

import click

from vtp.cli.exit_codes import ExitCode
from vtp.config import AppConfig, get_config
from vtp.jobs.service import job_url_prefix

logger = logging.getLogger(__name__)


def load_config(ctx: click.Context, **overrides: Any) -> AppConfig:
    """Load configuration with the group's options and command overrides.

    Exits with CONFIG_ERROR if the configuration is invalid.
    """
    obj = ctx.ensure_object(dict)
    try:
        return get_config(
            obj.get("config_path"),
            log_level=obj.get("log_level"),
            log_format=obj.get("log_format"),
            log_file=obj.get("log_file"),
            strict=obj.get("config_path") is not None,
            **overrides,
        )
    except (ValueError, tomllib.TOMLDecodeError) as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)


def output_url_prefix(
    config: AppConfig, output_dir: Path, url_prefix: str | None
) -> str | None:
    """Public URL of OUTPUT_DIR with a trailing slash, or None for no descriptor.

    A --url-prefix option names OUTPUT_DIR itself. The configured prefix
    names the output root, as it does for the server, so the directory
    name is appended to it.
    """
    if url_prefix is not None:
        return f"{url_prefix.rstrip('/')}/"
    if config.paths.url_prefix is not None:
        return job_url_prefix(config.paths.url_prefix, output_dir.name)
    return None
