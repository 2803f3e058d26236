"""Shared test fixtures for the transcode planner."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from vtp.core.codecs import AudioCodec, VideoCodec
from vtp.domain.models import ProbeResult, Track, TrackKind
from vtp.exceptions import SourceNotFoundError
from vtp.tools.models import Capabilities, CodecCapability
from vtp.tools.registry import CapabilityRegistry


class FakeProber:
    """SourceProber returning canned results keyed by path."""

    def __init__(self, results: dict[Path, ProbeResult] | None = None) -> None:
        self.results = dict(results or {})
        self.calls: list[Path] = []

    def probe(self, path: Path) -> ProbeResult:
        self.calls.append(path)
        try:
            return self.results[path]
        except KeyError:
            raise SourceNotFoundError(path) from None


@pytest.fixture
def sample_tracks() -> tuple[Track, ...]:
    """A typical anime episode: H.264 video, two audio tracks, two subs."""
    return (
        Track(index=0, kind=TrackKind.VIDEO, codec="h264", height=1080),
        Track(
            index=1,
            kind=TrackKind.AUDIO,
            codec="aac",
            language="jpn",
            channels=2,
        ),
        Track(
            index=2,
            kind=TrackKind.AUDIO,
            codec="ac3",
            language="eng",
            title="Dub",
            channels=6,
        ),
        Track(index=3, kind=TrackKind.SUBTITLE, codec="subrip", language="eng"),
        Track(index=4, kind=TrackKind.SUBTITLE, codec="hdmv_pgs_subtitle"),
    )


@pytest.fixture
def sample_probe(tmp_path: Path, sample_tracks: tuple[Track, ...]) -> ProbeResult:
    """Probe result for a source file that exists under tmp_path."""
    source = tmp_path / "media" / "Episode 01.mkv"
    source.parent.mkdir(parents=True, exist_ok=True)
    source.write_bytes(b"")
    return ProbeResult(
        path=source,
        duration=1420.0,
        tracks=sample_tracks,
        bit_rate=4_127_306,
        title="Episode 1",
    )


@pytest.fixture
def fake_prober(sample_probe: ProbeResult) -> FakeProber:
    return FakeProber({sample_probe.path: sample_probe})


@pytest.fixture
def full_capabilities() -> Capabilities:
    """Capabilities of an ffmpeg build with the usual encoders."""
    return Capabilities(
        video=(
            CodecCapability(VideoCodec.AV1, ("libaom-av1", "libsvtav1")),
            CodecCapability(VideoCodec.VP8, ("libvpx",)),
            CodecCapability(VideoCodec.VP9, ("libvpx-vp9",)),
            CodecCapability(VideoCodec.H264, ("libx264",)),
            CodecCapability(VideoCodec.H265, ("libx265",)),
        ),
        audio=(
            CodecCapability(AudioCodec.AAC),
            CodecCapability(AudioCodec.ALAC),
            CodecCapability(AudioCodec.OPUS, ("libopus",)),
            CodecCapability(AudioCodec.VORBIS, ("libvorbis",)),
            CodecCapability(AudioCodec.FLAC),
            CodecCapability(AudioCodec.MP3, ("libmp3lame",)),
        ),
    )


@pytest.fixture
def capability_registry(full_capabilities: Capabilities) -> CapabilityRegistry:
    return CapabilityRegistry("ffmpeg", probe=lambda _path: full_capabilities)


@pytest.fixture
def prober_factory() -> type[FakeProber]:
    """FakeProber class, for tests that need their own canned results."""
    return FakeProber


@pytest.fixture
def restore_root_logger():
    """configure_logging replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
