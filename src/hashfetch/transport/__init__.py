"""Transport — the HTTP capability behind each fetch."""

from hashfetch.transport.base import ResponseBody, Transport
from hashfetch.transport.httpx_transport import HttpxTransport

__all__ = ["HttpxTransport", "ResponseBody", "Transport"]
