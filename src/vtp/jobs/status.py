"""Observable values for job status, progress and output.

Two kinds of channel are used to report on the worker:

- LatestValue holds a single value. Subscribers see the current value and
  then each new one, but a slow subscriber only sees the most recent value
  when it catches up; intermediate values are skipped.
- OutputLog is append-only text. Every follower replays the log from the
  start and then receives appended text until the log is closed.

Both are meant to be used from a single event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

T = TypeVar("T")


class LatestValue(Generic[T]):
    """Single-slot broadcast of the most recently published value."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._version = 0
        self._changed = asyncio.Event()

    @property
    def value(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        """Number of values published since creation."""
        return self._version

    def publish(self, value: T) -> None:
        """Replace the current value and wake all subscribers."""
        self._value = value
        self._version += 1
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    async def wait_for_change(self, version: int) -> T:
        """Wait until the version differs from the one given.

        Returns immediately if a newer value has already been published.
        """
        while self._version == version:
            await self._changed.wait()
        return self._value

    async def subscribe(self) -> AsyncIterator[T]:
        """Yield the current value, then every value seen after it."""
        version = self._version
        yield self._value
        while True:
            value = await self.wait_for_change(version)
            version = self._version
            yield value


class OutputLog:
    """Append-only text log that any number of readers can follow."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._closed = False
        self._changed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    def __len__(self) -> int:
        return len(self._chunks)

    def _notify(self) -> None:
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    def append(self, text: str) -> None:
        """Append text to the log.

        Raises:
            RuntimeError: If the log has been closed.
        """
        if self._closed:
            raise RuntimeError("Cannot append to a closed output log")
        if not text:
            return
        self._chunks.append(text)
        self._notify()

    def close(self) -> None:
        """Mark the log complete; followers stop after the last chunk."""
        if not self._closed:
            self._closed = True
            self._notify()

    def chunks_since(self, position: int) -> list[str]:
        """Chunks appended after the first `position` chunks."""
        return self._chunks[position:]

    async def wait_beyond(self, position: int) -> None:
        """Wait until more than `position` chunks exist or the log closes."""
        while len(self._chunks) <= position and not self._closed:
            await self._changed.wait()

    async def follow(self) -> AsyncIterator[str]:
        """Yield every chunk from the start, then new chunks as they arrive.

        Ends once the log is closed and all chunks have been yielded.
        """
        position = 0
        while True:
            for chunk in self.chunks_since(position):
                position += 1
                yield chunk
            if self._closed and position >= len(self._chunks):
                return
            await self.wait_beyond(position)
