"""`vtp demux` command: split embedded audio out of finished video files."""

from __future__ import annotations

import json
import logging
import subprocess
import sys
from pathlib import Path

import click

from vtp.cli.context import load_config, output_url_prefix
from vtp.cli.exit_codes import ExitCode
from vtp.core.subprocess_utils import format_command, run_command
from vtp.manifest.descriptor import to_platform_descriptor
from vtp.manifest.io import load_manifest, write_descriptor, write_manifest
from vtp.planning.demux import build_demux_commands

logger = logging.getLogger(__name__)


@click.command("demux")
@click.argument(
    "output_dir", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option(
    "--url-prefix",
    default=None,
    help="Public URL of OUTPUT_DIR; rewrites descriptor.json. Defaults to "
    "the configured url_prefix joined with the OUTPUT_DIR name.",
)
@click.option(
    "--keep-originals", is_flag=True, help="Keep the video files with embedded audio."
)
@click.option(
    "--dry-run", is_flag=True, help="Print the ffmpeg commands without running them."
)
@click.pass_context
def demux_command(
    ctx: click.Context,
    output_dir: Path,
    url_prefix: str | None,
    keep_originals: bool,
    dry_run: bool,
) -> None:
    """Move the embedded audio of a finished transcode into its own file.

    Reads OUTPUT_DIR/manifest.json, copies each video file without its
    audio, extracts the best embedded audio track, and rewrites the
    manifest.
    """
    config = load_config(ctx)
    try:
        manifest = load_manifest(output_dir)
    except FileNotFoundError:
        click.echo(f"Error: no manifest in {output_dir}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)
    except (ValueError, json.JSONDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.MANIFEST_ERROR)

    commands, updated = build_demux_commands(
        manifest, output_dir, ffmpeg_path=config.tools.ffmpeg
    )
    if not commands:
        click.echo("Nothing to demux: no video file has embedded audio")
        return

    for command in commands:
        click.echo(format_command(command))
        if dry_run:
            continue
        try:
            _, stderr, returncode = run_command(command, timeout=None)
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(ExitCode.TOOL_NOT_AVAILABLE)
        if returncode != 0:
            click.echo(stderr, err=True)
            click.echo(f"Error: ffmpeg exited with code {returncode}", err=True)
            sys.exit(ExitCode.TRANSCODE_FAILED)

    if dry_run:
        return

    write_manifest(updated, output_dir)
    descriptor_prefix = output_url_prefix(config, output_dir, url_prefix)
    if descriptor_prefix is not None:
        descriptor = to_platform_descriptor(updated, descriptor_prefix)
        write_descriptor(descriptor, output_dir)

    if not keep_originals:
        for name in set(manifest.filenames) - set(updated.filenames):
            (output_dir / name).unlink(missing_ok=True)
            logger.info("Removed %s", name)
    click.echo(f"Demuxed {len(commands)} video files in {output_dir}")
