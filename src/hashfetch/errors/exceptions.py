"""Custom exception hierarchy for hashfetch."""

from __future__ import annotations

from typing import Any


class HashFetchError(Exception):
    """Base exception for all hashfetch errors."""

    def __init__(self, message: str = "", url: str | None = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url


class InvalidURLError(HashFetchError):
    """The raw input could not be turned into an http(s) URL.

    Examples: empty string, unparsable URL, ftp:// or mailto: scheme.
    """


class TransportError(HashFetchError):
    """The transport could not produce a response body.

    Examples: connection refused, DNS failure, timeout, cancelled context.
    """

    def __init__(
        self,
        message: str = "",
        url: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.original = original


class ContextCancelledError(TransportError):
    """The run context was cancelled or its deadline passed."""


class DigestError(HashFetchError):
    """Reading the response body failed part-way through hashing."""

    def __init__(
        self,
        message: str = "",
        url: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.original = original


class ConfigurationError(HashFetchError):
    """Invalid construction-time setting — fail fast.

    Examples: parallel count below 1, unknown digest algorithm.
    """


class ChannelClosedError(HashFetchError):
    """Operation on a closed channel, or a channel closed twice."""
