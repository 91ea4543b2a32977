"""Cancellable execution context shared by every fetch in a run."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from hashfetch.errors.exceptions import ContextCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RunContext:
    """Cancellation signal with an optional deadline.

    Cancelling is one-way and idempotent. Awaitables wrapped in ``guard``
    fail fast with ContextCancelledError once the context is cancelled.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def start(self) -> None:
        """Arm the deadline timer, if any. Must run inside an event loop."""
        if self._timeout is None or self._timer is not None or self.cancelled:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._timeout, self.cancel, "deadline exceeded")

    def disarm(self) -> None:
        """Drop a pending deadline so a later ``start()`` arms a fresh one."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def cancel(self, reason: str = "context cancelled") -> None:
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        if self._timer is not None:
            self._timer.cancel()
        logger.debug("Run context cancelled: %s", reason)

    async def wait(self) -> None:
        """Block until the context is cancelled."""
        await self._event.wait()

    async def guard(self, aw: Awaitable[T], url: str | None = None) -> T:
        """Await ``aw`` unless the context is cancelled first.

        On cancellation the inner task is cancelled and awaited, so its
        cleanup (closing response bodies) runs before this raises.
        """
        if self.cancelled:
            if asyncio.iscoroutine(aw):
                aw.close()
            raise ContextCancelledError(self._reason or "context cancelled", url=url)

        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

        if task in done:
            return task.result()
        raise ContextCancelledError(self._reason or "context cancelled", url=url)
