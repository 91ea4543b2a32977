"""Tests for custom exception hierarchy."""

import pytest

from hashfetch.errors.exceptions import (
    ChannelClosedError,
    ConfigurationError,
    ContextCancelledError,
    DigestError,
    HashFetchError,
    InvalidURLError,
    TransportError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_base(self):
        for cls in (
            InvalidURLError,
            TransportError,
            ContextCancelledError,
            DigestError,
            ConfigurationError,
            ChannelClosedError,
        ):
            assert issubclass(cls, HashFetchError)

    def test_all_inherit_from_exception(self):
        assert issubclass(HashFetchError, Exception)

    def test_cancellation_is_transport_failure(self):
        assert issubclass(ContextCancelledError, TransportError)


class TestHashFetchError:
    def test_message_and_url(self):
        err = InvalidURLError("invalid url: ftp://x", url="ftp://x")
        assert err.message == "invalid url: ftp://x"
        assert err.url == "ftp://x"
        assert "ftp://x" in str(err)

    def test_url_defaults_to_none(self):
        assert HashFetchError("x").url is None


class TestTransportError:
    def test_attributes(self):
        cause = ConnectionRefusedError("refused")
        err = TransportError("Connection error", url="http://a", original=cause)
        assert err.url == "http://a"
        assert err.original is cause

    def test_defaults(self):
        err = TransportError("test")
        assert err.original is None


class TestDigestError:
    def test_attributes(self):
        cause = OSError("reset")
        err = DigestError("read failed", url="http://a", original=cause)
        assert err.original is cause

    def test_catchable_as_base(self):
        with pytest.raises(HashFetchError):
            raise DigestError("fail")
