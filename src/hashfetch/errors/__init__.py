"""Error handling — the hashfetch exception hierarchy."""

from hashfetch.errors.exceptions import (
    ChannelClosedError,
    ConfigurationError,
    ContextCancelledError,
    DigestError,
    HashFetchError,
    InvalidURLError,
    TransportError,
)

__all__ = [
    "HashFetchError",
    "InvalidURLError",
    "TransportError",
    "ContextCancelledError",
    "DigestError",
    "ConfigurationError",
    "ChannelClosedError",
]
