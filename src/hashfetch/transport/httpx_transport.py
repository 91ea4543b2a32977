"""httpx-backed transport: streaming GETs with a shared async client."""

from __future__ import annotations

import logging

import httpx

from hashfetch.errors.exceptions import ContextCancelledError, TransportError
from hashfetch.types import FetchRequest

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Issues requests through one pooled ``httpx.AsyncClient``.

    Status codes are not inspected: a 404 page is hashed like any other body.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        follow_redirects: bool = True,
        user_agent: str = "hashfetch/0.1",
        max_connections: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.user_agent = user_agent

        limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections,
        )
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=follow_redirects,
            headers={"User-Agent": user_agent},
            limits=limits,
            transport=transport,
        )

    async def issue(self, request: FetchRequest) -> httpx.Response:
        """Send ``request`` and return the response with its body unread.

        The caller owns the response and must ``aclose()`` it.
        """
        ctx = request.context
        if ctx is not None and ctx.cancelled:
            raise ContextCancelledError(ctx.reason or "context cancelled", url=request.url)

        try:
            http_request = self._client.build_request(request.method, request.url)
            response = await self._client.send(http_request, stream=True)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Timeout after {self.timeout}s: {e}", url=request.url, original=e
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(
                f"{type(e).__name__}: {e}", url=request.url, original=e
            ) from e

        logger.debug("%s %s -> %d", request.method, request.url, response.status_code)
        return response

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
