"""`vtp capabilities` and `vtp probe` commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from vtp.cli.context import load_config
from vtp.cli.exit_codes import ExitCode
from vtp.core.codecs import is_bitmap_subtitle
from vtp.core.languages import language_label
from vtp.domain.models import ProbeResult, Track, TrackKind
from vtp.exceptions import CapabilityProbeError, SourceNotFoundError, SourceProbeError
from vtp.introspector.ffprobe import FFprobeIntrospector
from vtp.planning.defaults import default_request
from vtp.planning.request import TranscodeRequestModel
from vtp.tools.detection import probe_capabilities


@click.command("capabilities")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def capabilities_command(ctx: click.Context, as_json: bool) -> None:
    """List the target codecs this ffmpeg can encode, with their encoders."""
    config = load_config(ctx)
    try:
        capabilities = probe_capabilities(config.tools.ffmpeg)
    except CapabilityProbeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)

    if as_json:
        click.echo(json.dumps(capabilities.to_dict(), indent=2))
        return

    for heading, entries in (
        ("Video", capabilities.video),
        ("Audio", capabilities.audio),
    ):
        click.echo(f"{heading}:")
        if not entries:
            click.echo("  (none)")
        for entry in entries:
            encoders = ", ".join(entry.encoders) or "(default)"
            click.echo(f"  {entry.codec.display_name:<10} {encoders}")


def _describe_track(track: Track) -> str:
    parts = [f"#{track.index}", track.kind.value, track.codec]
    if track.kind is TrackKind.VIDEO and track.height:
        parts.append(f"{track.height}p")
    if track.kind is TrackKind.AUDIO and track.channels:
        parts.append(f"{track.channels}ch")
    if track.language or track.title:
        parts.append(language_label(track.language, track.title) or "")
    if track.kind is TrackKind.SUBTITLE and is_bitmap_subtitle(track.codec):
        parts.append("[bitmap, not convertible]")
    return "  ".join(p for p in parts if p)


def _print_probe(probe: ProbeResult) -> None:
    click.echo(f"File:     {probe.path}")
    if probe.title:
        click.echo(f"Title:    {probe.title}")
    click.echo(f"Duration: {probe.duration:.2f}s")
    if probe.bit_rate:
        click.echo(f"Bitrate:  {probe.bit_rate // 1000} kb/s")
    click.echo("Tracks:")
    for track in probe.tracks:
        click.echo(f"  {_describe_track(track)}")


@click.command("probe")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def probe_command(ctx: click.Context, file: Path, as_json: bool) -> None:
    """Show the tracks of FILE and the default selection for it."""
    config = load_config(ctx)
    try:
        probe = FFprobeIntrospector(config.tools.ffprobe).probe(file)
    except SourceNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)
    except SourceProbeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.PROBE_FAILED)

    defaults = TranscodeRequestModel.from_request(default_request(probe))
    if as_json:
        payload = {"probe": probe.to_dict(), "defaults": defaults.model_dump()}
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    _print_probe(probe)
    click.echo("Default selection:")
    for sel in defaults.video_tracks:
        click.echo(f"  video #{sel.track} -> {sel.codec} ({sel.encoder})")
    for sel in defaults.audio_tracks:
        click.echo(f"  audio #{sel.track} -> {sel.codec} ({sel.encoder})")
    for index in defaults.subtitle_tracks:
        click.echo(f"  subtitle #{index} -> webvtt")
