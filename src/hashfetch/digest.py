"""Streaming digest accumulators for response bodies."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import AsyncIterable, Callable
from typing import Protocol, runtime_checkable

from hashfetch.errors.exceptions import ConfigurationError, DigestError

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "md5"


@runtime_checkable
class Accumulator(Protocol):
    """Incremental hash state. ``hashlib`` objects satisfy this."""

    def update(self, data: bytes, /) -> None: ...

    def digest(self) -> bytes: ...

    def hexdigest(self) -> str: ...


DigestFactory = Callable[[], Accumulator]


def new_accumulator(algorithm: str = DEFAULT_ALGORITHM) -> Accumulator:
    """Create a fresh accumulator for a hashlib algorithm name."""
    try:
        # md5/sha1 are checksums here, not security primitives
        return hashlib.new(algorithm.lower(), usedforsecurity=False)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Unsupported digest algorithm: {algorithm}") from e


def resolve_digest_factory(algorithm: str | DigestFactory = DEFAULT_ALGORITHM) -> DigestFactory:
    """Turn an algorithm name or factory into a zero-arg factory.

    Names are checked eagerly so a typo fails at construction, not per URL.
    Variable-length digests (shake_*) are rejected since they need a length.
    """
    if callable(algorithm):
        return algorithm

    probe = new_accumulator(algorithm)
    if getattr(probe, "digest_size", 1) == 0:
        raise ConfigurationError(f"Variable-length digest not supported: {algorithm}")

    name = algorithm.lower()
    return lambda: new_accumulator(name)


def available_algorithms() -> list[str]:
    return sorted(
        name for name in hashlib.algorithms_available if not name.startswith("shake_")
    )


async def digest_stream(
    chunks: AsyncIterable[bytes],
    factory: DigestFactory | None = None,
) -> str:
    """Hash an async byte stream chunk by chunk; return the hex digest.

    The body is never held in memory as a whole. Any read failure becomes
    a DigestError.
    """
    acc = (factory or new_accumulator)()
    try:
        async for chunk in chunks:
            acc.update(chunk)
    except DigestError:
        raise
    except Exception as e:
        raise DigestError(f"Error reading body: {e}", original=e) from e
    return acc.digest().hex()


def digest_bytes(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Hex digest of an in-memory byte string."""
    acc = new_accumulator(algorithm)
    acc.update(data)
    return acc.hexdigest()
