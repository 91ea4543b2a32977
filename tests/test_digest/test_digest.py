"""Tests for streaming digest accumulators."""

import hashlib

import pytest

from hashfetch.digest import (
    Accumulator,
    available_algorithms,
    digest_bytes,
    digest_stream,
    new_accumulator,
    resolve_digest_factory,
)
from hashfetch.errors.exceptions import ConfigurationError, DigestError


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


async def _broken(*parts: bytes):
    for part in parts:
        yield part
    raise OSError("stream reset")


class TestDigestBytes:
    def test_md5_reference(self):
        assert digest_bytes(b"my request") == "0a44cf32bcd5f63fc5e047e25f991f97"

    def test_sha256_reference(self):
        assert digest_bytes(b"abc", "sha256") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_empty_input(self):
        assert digest_bytes(b"") == "d41d8cd98f00b204e9800998ecf8427e"

    def test_deterministic(self):
        assert digest_bytes(b"data") == digest_bytes(b"data")

    def test_returns_lowercase_hex(self):
        h = digest_bytes(b"test")
        assert len(h) == 32
        assert all(c in "0123456789abcdef" for c in h)


class TestNewAccumulator:
    def test_satisfies_protocol(self):
        assert isinstance(new_accumulator("md5"), Accumulator)

    def test_case_insensitive(self):
        acc = new_accumulator("SHA256")
        acc.update(b"abc")
        assert acc.hexdigest() == hashlib.sha256(b"abc").hexdigest()

    def test_unknown_algorithm(self):
        with pytest.raises(ConfigurationError, match="Unsupported"):
            new_accumulator("not-a-hash")


class TestResolveDigestFactory:
    def test_name_gives_fresh_accumulators(self):
        factory = resolve_digest_factory("md5")
        a, b = factory(), factory()
        a.update(b"x")
        assert a is not b
        assert b.hexdigest() == hashlib.md5(b"").hexdigest()

    def test_callable_passthrough(self):
        factory = resolve_digest_factory(hashlib.sha1)
        assert factory is hashlib.sha1

    def test_unknown_name_fails_eagerly(self):
        with pytest.raises(ConfigurationError):
            resolve_digest_factory("nope")

    def test_variable_length_rejected(self):
        with pytest.raises(ConfigurationError, match="Variable-length"):
            resolve_digest_factory("shake_128")

    def test_available_algorithms(self):
        names = available_algorithms()
        assert "md5" in names
        assert "sha256" in names
        assert not any(n.startswith("shake_") for n in names)


class TestDigestStream:
    async def test_matches_one_shot_hash(self):
        h = await digest_stream(_chunks(b"my ", b"req", b"uest"))
        assert h == "0a44cf32bcd5f63fc5e047e25f991f97"

    async def test_empty_stream(self):
        assert await digest_stream(_chunks()) == hashlib.md5(b"").hexdigest()

    async def test_custom_factory(self):
        h = await digest_stream(_chunks(b"a", b"bc"), hashlib.sha256)
        assert h == hashlib.sha256(b"abc").hexdigest()

    async def test_chunking_does_not_matter(self):
        data = bytes(range(256)) * 50
        whole = await digest_stream(_chunks(data))
        pieces = await digest_stream(_chunks(*(data[i:i + 7] for i in range(0, len(data), 7))))
        assert whole == pieces == hashlib.md5(data).hexdigest()

    async def test_read_error_becomes_digest_error(self):
        with pytest.raises(DigestError) as exc_info:
            await digest_stream(_broken(b"partial"))
        assert isinstance(exc_info.value.original, OSError)
