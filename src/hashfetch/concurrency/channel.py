"""Closable async channel — an asyncio.Queue with a single-close protocol."""

from __future__ import annotations

import asyncio
import logging
from typing import Generic, TypeVar

from hashfetch.errors.exceptions import ChannelClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Channel(Generic[T]):
    """Bounded FIFO hand-off between producers and consumers.

    Closing means "no more items": producers may no longer put, consumers
    keep receiving until the buffer is empty and then get ChannelClosedError
    (or StopAsyncIteration when iterating). A channel is closed exactly once.
    """

    def __init__(self, maxsize: int = 0, name: str = "channel") -> None:
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize)
        self._closed = asyncio.Event()
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    def qsize(self) -> int:
        return self._queue.qsize()

    async def put(self, item: T) -> None:
        """Enqueue ``item``, waiting for space if the buffer is full."""
        if self.closed:
            raise ChannelClosedError(f"put on closed {self._name}")
        await self._queue.put(item)

    def close(self) -> None:
        if self.closed:
            raise ChannelClosedError(f"{self._name} closed twice")
        self._closed.set()
        logger.debug("%s closed with %d buffered item(s)", self._name, self.qsize())

    async def get(self) -> T:
        """Dequeue the next item.

        Raises ChannelClosedError once the channel is closed and drained.
        """
        while True:
            if not self._queue.empty():
                return self._queue.get_nowait()
            if self.closed:
                raise ChannelClosedError(f"{self._name} is closed")

            getter = asyncio.ensure_future(self._queue.get())
            closer = asyncio.ensure_future(self._closed.wait())
            try:
                await asyncio.wait({getter, closer}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                closer.cancel()
                if not getter.done():
                    getter.cancel()
                    await asyncio.gather(getter, return_exceptions=True)

            if getter.done() and not getter.cancelled():
                return getter.result()
            # Closed while waiting; loop to drain anything still buffered.

    def __aiter__(self) -> Channel[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.get()
        except ChannelClosedError:
            raise StopAsyncIteration from None
