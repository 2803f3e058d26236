"""Fixtures for HTTP API tests.

The app's worker starts with the test server, so ffmpeg is replaced with
fake processes that stay running until a test feeds their stderr EOF.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from vtp.jobs.service import TranscodeService
from vtp.server.app import create_app


class FakeFFmpeg:
    """A running ffmpeg process controlled by the test."""

    pid = 4242

    def __init__(self) -> None:
        self.stderr = asyncio.StreamReader()
        self.returncode: int | None = None

    def emit(self, data: bytes) -> None:
        self.stderr.feed_data(data)

    def finish(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.stderr.feed_eof()

    async def wait(self) -> int:
        await asyncio.sleep(0)
        return self.returncode if self.returncode is not None else 0

    def kill(self) -> None:
        self.finish(-9)


@pytest.fixture
def spawned():
    """Fake ffmpeg processes, in spawn order."""
    processes: list[FakeFFmpeg] = []

    async def fake_exec(*args, **kwargs):
        process = FakeFFmpeg()
        processes.append(process)
        return process

    with patch("vtp.jobs.worker.asyncio.create_subprocess_exec", fake_exec):
        yield processes


@pytest.fixture
def wait_until():
    """Poll a condition from the test's event loop."""

    async def wait(condition, timeout: float = 2.0) -> None:
        async def poll():
            while not condition():
                await asyncio.sleep(0.01)

        await asyncio.wait_for(poll(), timeout=timeout)

    return wait


@pytest.fixture
def media_dir(sample_probe) -> Path:
    return sample_probe.path.parent


@pytest.fixture
def service(fake_prober, capability_registry, tmp_path) -> TranscodeService:
    return TranscodeService(
        fake_prober,
        capability_registry,
        tmp_path / "out",
        url_prefix="https://cdn.example/media",
    )


@pytest.fixture
async def client(aiohttp_client, service, media_dir, spawned):
    return await aiohttp_client(create_app(service, media_dir))


@pytest.fixture
def job_body():
    """A submission that copies video and audio and converts one subtitle."""
    return {
        "slug": "ep1",
        "video_tracks": [{"track": 0, "codec": "h264"}],
        "audio_tracks": [{"track": 1, "codec": "aac"}],
        "subtitle_tracks": [3],
    }


@pytest.fixture(autouse=True)
def fast_heartbeat(monkeypatch):
    """Let streams notice closed connections quickly."""
    monkeypatch.setattr("vtp.server.events.SSE_HEARTBEAT_INTERVAL", 0.1)
