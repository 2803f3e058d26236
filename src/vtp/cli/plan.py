"""`vtp plan` command: transcode one file with the default selection."""

from __future__ import annotations

import asyncio
import sys
from dataclasses import replace
from pathlib import Path

import click

from vtp.cli.context import load_config, output_url_prefix
from vtp.cli.exit_codes import ExitCode
from vtp.core.subprocess_utils import format_command
from vtp.exceptions import (
    CapabilityProbeError,
    PlanningError,
    SourceNotFoundError,
    SourceProbeError,
)
from vtp.introspector.ffprobe import FFprobeIntrospector
from vtp.jobs.models import Job
from vtp.jobs.queue import TranscodeQueue
from vtp.jobs.worker import TranscodeWorker
from vtp.manifest.descriptor import to_platform_descriptor
from vtp.manifest.io import write_descriptor, write_manifest
from vtp.planning.builder import TranscodePlan, build_transcode_plan
from vtp.planning.defaults import default_request
from vtp.planning.request import validate_encoders
from vtp.tools.detection import probe_capabilities
from vtp.tools.ffmpeg_progress import progress_percent


async def _report_progress(worker: TranscodeWorker, duration: float) -> None:
    version = worker.progress.version
    while True:
        elapsed = await worker.progress.wait_for_change(version)
        version = worker.progress.version
        percent = progress_percent(elapsed, duration)
        click.echo(f"\r  {elapsed:9.1f}s / {duration:.1f}s  {percent:5.1f}%", nl=False)


async def _run(job: Job, show_progress: bool) -> bool:
    worker = TranscodeWorker(TranscodeQueue())
    reporter = None
    if show_progress:
        reporter = asyncio.create_task(_report_progress(worker, job.duration))
    try:
        return await worker.run_job(job)
    finally:
        if reporter is not None:
            reporter.cancel()
            click.echo()


@click.command("plan")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("output_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--title", default=None, help="Display title (default: from file).")
@click.option(
    "--url-prefix",
    default=None,
    help="Public URL of OUTPUT_DIR; also writes descriptor.json. Defaults to "
    "the configured url_prefix joined with the OUTPUT_DIR name.",
)
@click.option(
    "--force-demux", is_flag=True, help="Write audio to standalone files."
)
@click.option(
    "--silence",
    is_flag=True,
    help="Embed a silent audio track in video files when audio is demuxed.",
)
@click.option(
    "--dry-run", is_flag=True, help="Print the ffmpeg command without running it."
)
@click.option("--quiet", "-q", is_flag=True, help="Do not show progress.")
@click.pass_context
def plan_command(
    ctx: click.Context,
    file: Path,
    output_dir: Path,
    title: str | None,
    url_prefix: str | None,
    force_demux: bool,
    silence: bool,
    dry_run: bool,
    quiet: bool,
) -> None:
    """Transcode FILE into OUTPUT_DIR using the default track selection.

    Writes manifest.json (and descriptor.json when a URL prefix is given or
    configured) before running ffmpeg in the foreground.

    \b
    Examples:
        vtp plan movie.mkv out/movie
        vtp plan movie.mkv out/movie --url-prefix https://cdn.example/movie/
        vtp plan movie.mkv out/movie --force-demux --silence --dry-run
    """
    config = load_config(ctx)
    try:
        probe = FFprobeIntrospector(config.tools.ffprobe).probe(file)
    except SourceNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)
    except SourceProbeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.PROBE_FAILED)

    request = replace(
        default_request(probe, title=title),
        force_demux_audio=force_demux,
        add_muxed_silence=silence,
    )

    try:
        validate_encoders(request, probe_capabilities(config.tools.ffmpeg))
        plan: TranscodePlan = build_transcode_plan(
            file, request, output_dir, ffmpeg_path=config.tools.ffmpeg
        )
    except CapabilityProbeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)
    except PlanningError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.PLANNING_ERROR)

    click.echo(format_command(plan.command))
    if dry_run:
        return

    output_dir.mkdir(parents=True, exist_ok=True)
    write_manifest(plan.manifest, output_dir)
    descriptor_prefix = output_url_prefix(config, output_dir, url_prefix)
    if descriptor_prefix is not None:
        descriptor = to_platform_descriptor(plan.manifest, descriptor_prefix)
        write_descriptor(descriptor, output_dir)

    job = Job(
        slug=output_dir.name,
        source=file,
        plan=plan,
        duration=plan.manifest.duration,
    )
    try:
        succeeded = asyncio.run(_run(job, show_progress=not quiet))
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(ExitCode.INTERRUPTED)

    if not succeeded:
        click.echo(job.output.text, err=True, nl=False)
        click.echo("Error: ffmpeg failed", err=True)
        sys.exit(ExitCode.TRANSCODE_FAILED)
    click.echo(f"Wrote {len(plan.manifest.filenames)} files to {output_dir}")
