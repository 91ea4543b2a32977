"""Transport capability consumed by the processor."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from hashfetch.types import FetchRequest


@runtime_checkable
class ResponseBody(Protocol):
    """A streamed response body. ``httpx.Response`` opened with
    ``stream=True`` satisfies this."""

    def aiter_bytes(self) -> AsyncIterator[bytes]: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class Transport(Protocol):
    """Issues a request and returns its body stream.

    Implementations raise TransportError on failure and should honor
    ``request.context`` cancellation where they can.
    """

    async def issue(self, request: FetchRequest) -> ResponseBody: ...
