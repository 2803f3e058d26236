"""Tests for the transcode queue and job models."""

import asyncio
from pathlib import Path

import pytest

from vtp.jobs.models import Job, TranscodeStatus, WorkerState
from vtp.jobs.queue import TranscodeQueue
from vtp.manifest.models import Manifest
from vtp.planning.builder import TranscodePlan


def make_job(slug: str, duration: float = 60.0) -> Job:
    plan = TranscodePlan(
        command=("ffmpeg", "-i", f"/media/{slug}.mkv", f"/out/{slug}/main.mp4"),
        manifest=Manifest(title=slug, duration=duration),
        demux_audio=True,
        output_dir=Path("/out") / slug,
    )
    return Job(
        slug=slug, source=Path(f"/media/{slug}.mkv"), plan=plan, duration=duration
    )


class TestTranscodeQueue:
    """Tests for TranscodeQueue."""

    @pytest.mark.asyncio
    async def test_positions_are_one_based(self):
        queue = TranscodeQueue()
        positions = [await queue.put(make_job(s)) for s in ("a", "b", "c")]
        assert positions == [1, 2, 3]
        assert len(queue) == 3

    @pytest.mark.asyncio
    async def test_fifo_order(self):
        queue = TranscodeQueue()
        for slug in ("a", "b", "c"):
            await queue.put(make_job(slug))

        assert await queue.slugs() == ["a", "b", "c"]
        assert (await queue.pop()).slug == "a"
        assert (await queue.get()).slug == "b"
        assert await queue.slugs() == ["c"]

    @pytest.mark.asyncio
    async def test_pop_empty_returns_none(self):
        assert await TranscodeQueue().pop() is None

    @pytest.mark.asyncio
    async def test_get_waits_for_put(self):
        queue = TranscodeQueue()
        getter = asyncio.create_task(queue.get())
        await asyncio.sleep(0)
        assert not getter.done()

        await queue.put(make_job("late"))
        job = await asyncio.wait_for(getter, timeout=1)
        assert job.slug == "late"

    @pytest.mark.asyncio
    async def test_position_counts_only_waiting_jobs(self):
        queue = TranscodeQueue()
        await queue.put(make_job("a"))
        await queue.pop()
        assert await queue.put(make_job("b")) == 1

    @pytest.mark.asyncio
    async def test_find(self):
        queue = TranscodeQueue()
        job = make_job("a")
        await queue.put(job)
        assert queue.find("a") is job
        assert queue.find("b") is None


class TestTranscodeStatus:
    """Tests for TranscodeStatus."""

    def test_idle(self):
        status = TranscodeStatus.idle()
        assert status.is_idle
        assert status.slug is None
        assert status.duration is None
        assert status.to_dict() == {"state": "idle"}

    def test_working(self):
        status = TranscodeStatus.working(make_job("ep1", duration=1420.0))
        assert status.state is WorkerState.WORKING
        assert not status.is_idle
        assert status.to_dict() == {
            "state": "working",
            "slug": "ep1",
            "duration": 1420.0,
        }

    def test_job_command_comes_from_plan(self):
        job = make_job("ep1")
        assert job.command == job.plan.command
        assert not job.output.closed
