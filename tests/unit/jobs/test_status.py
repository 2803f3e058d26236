"""Tests for LatestValue and OutputLog."""

import asyncio

import pytest

from vtp.jobs.status import LatestValue, OutputLog


async def take(iterator, count):
    """Collect `count` items from an async iterator."""
    items = []
    async for item in iterator:
        items.append(item)
        if len(items) == count:
            break
    return items


class TestLatestValue:
    """Tests for LatestValue."""

    def test_publish_replaces_value(self):
        channel = LatestValue(0)
        channel.publish(5)
        assert channel.value == 5
        assert channel.version == 1

    @pytest.mark.asyncio
    async def test_subscribe_starts_with_current_value(self):
        channel = LatestValue("idle")
        subscription = channel.subscribe()
        assert await anext(subscription) == "idle"

    @pytest.mark.asyncio
    async def test_subscribers_see_each_change(self):
        channel = LatestValue(0)
        collector = asyncio.create_task(take(channel.subscribe(), 3))
        await asyncio.sleep(0)

        channel.publish(1)
        await asyncio.sleep(0)
        channel.publish(2)

        assert await asyncio.wait_for(collector, timeout=1) == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_slow_subscriber_only_sees_latest(self):
        channel = LatestValue(0)
        subscription = channel.subscribe()
        assert await anext(subscription) == 0

        for value in (1, 2, 3):
            channel.publish(value)

        assert await asyncio.wait_for(anext(subscription), timeout=1) == 3

    @pytest.mark.asyncio
    async def test_wait_for_change_returns_immediately_when_stale(self):
        channel = LatestValue(0.0)
        channel.publish(1.5)
        assert await asyncio.wait_for(channel.wait_for_change(0), timeout=1) == 1.5

    @pytest.mark.asyncio
    async def test_many_subscribers(self):
        channel = LatestValue(0)
        tasks = [asyncio.create_task(take(channel.subscribe(), 2)) for _ in range(3)]
        await asyncio.sleep(0)
        channel.publish(7)

        results = await asyncio.wait_for(asyncio.gather(*tasks), timeout=1)
        assert results == [[0, 7]] * 3


class TestOutputLog:
    """Tests for OutputLog."""

    def test_append_and_text(self):
        log = OutputLog()
        log.append("a\n")
        log.append("")
        log.append("b\n")
        assert log.text == "a\nb\n"
        assert len(log) == 2

    def test_append_after_close_raises(self):
        log = OutputLog()
        log.close()
        with pytest.raises(RuntimeError):
            log.append("late\n")

    def test_chunks_since(self):
        log = OutputLog()
        for text in ("a", "b", "c"):
            log.append(text)
        assert log.chunks_since(1) == ["b", "c"]
        assert log.chunks_since(3) == []

    @pytest.mark.asyncio
    async def test_follow_replays_then_streams(self):
        log = OutputLog()
        log.append("first\n")

        async def collect():
            return [chunk async for chunk in log.follow()]

        follower = asyncio.create_task(collect())
        await asyncio.sleep(0)
        log.append("second\n")
        await asyncio.sleep(0)
        log.append("third\n")
        log.close()

        assert await asyncio.wait_for(follower, timeout=1) == [
            "first\n",
            "second\n",
            "third\n",
        ]

    @pytest.mark.asyncio
    async def test_follow_closed_log_replays_everything(self):
        """A late follower still receives the full log."""
        log = OutputLog()
        log.append("x\n")
        log.append("y\n")
        log.close()

        chunks = [chunk async for chunk in log.follow()]
        assert chunks == ["x\n", "y\n"]

    @pytest.mark.asyncio
    async def test_wait_beyond_wakes_on_close(self):
        log = OutputLog()
        waiter = asyncio.create_task(log.wait_beyond(0))
        await asyncio.sleep(0)
        assert not waiter.done()
        log.close()
        await asyncio.wait_for(waiter, timeout=1)
        assert log.closed
