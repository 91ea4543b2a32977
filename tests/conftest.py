import asyncio

import pytest

from hashfetch.errors.exceptions import TransportError
from hashfetch.types import FetchRequest


class FakeBody:
    """In-memory response body that records whether it was closed."""

    def __init__(self, data: bytes, chunk_size: int = 4, fail_after: int | None = None,
                 delay: float = 0.0, fail_close: bool = False):
        self._data = data
        self._chunk_size = chunk_size
        self._fail_after = fail_after
        self._delay = delay
        self._fail_close = fail_close
        self.closed = False

    async def aiter_bytes(self):
        for n, i in enumerate(range(0, len(self._data), self._chunk_size)):
            if self._fail_after is not None and n >= self._fail_after:
                raise ConnectionResetError("connection reset mid-body")
            if self._delay:
                await asyncio.sleep(self._delay)
            yield self._data[i:i + self._chunk_size]

    async def aclose(self):
        self.closed = True
        if self._fail_close:
            raise OSError("close failed")


class FakeTransport:
    """Maps URL -> body bytes. Unknown URLs get b"Not Found"; URLs mapped to
    an exception raise it."""

    def __init__(self, pages=None, delay: float = 0.0, chunk_size: int = 4):
        self.pages = dict(pages or {})
        self.delay = delay
        self.chunk_size = chunk_size
        self.requests: list[FetchRequest] = []
        self.bodies: list[FakeBody] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def issue(self, request: FetchRequest):
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            page = self.pages.get(request.url, b"Not Found")
            if isinstance(page, Exception):
                raise page
            if isinstance(page, FakeBody):
                body = page
            else:
                body = FakeBody(page, chunk_size=self.chunk_size)
            self.bodies.append(body)
            return body
        finally:
            self.in_flight -= 1


class HangingTransport:
    """Never answers until cancelled."""

    def __init__(self):
        self.started = 0
        self.cancelled = 0

    async def issue(self, request: FetchRequest):
        self.started += 1
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        raise TransportError("unreachable", url=request.url)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch):
    """Keep user/project config files and HASHFETCH_* env out of tests."""
    import hashfetch.config.hierarchy as hierarchy

    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    monkeypatch.setattr(hierarchy, "_find_project_config", lambda: None)
    for key in list(hierarchy._ENV_MAP):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def make_body():
    return FakeBody


@pytest.fixture
def hanging_transport():
    return HangingTransport()
