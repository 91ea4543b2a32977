"""Bounded-concurrency fetch-and-hash pipeline.

Topology::

    urls ──seeder──▶ jobs ──▶ N workers ──▶ results ──collector──▶ sink
                                  │
                       supervisor joins workers, then closes results

The job channel is closed once, by the seeder, after every URL is queued.
The result channel is closed once, by the supervisor, after every worker has
exited. Workers never close anything.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Callable, Sequence
from typing import Protocol

from hashfetch.concurrency.channel import Channel
from hashfetch.context import RunContext
from hashfetch.digest import (
    DEFAULT_ALGORITHM,
    DigestFactory,
    digest_stream,
    resolve_digest_factory,
)
from hashfetch.errors.exceptions import ConfigurationError, HashFetchError, TransportError
from hashfetch.transport.base import Transport
from hashfetch.types import FetchRequest, Result, RunSummary
from hashfetch.urls import validate_url

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[HashFetchError], None]


class OutputSink(Protocol):
    def write(self, text: str, /) -> object: ...


class Processor:
    """Fetches URLs with ``parallel_count`` workers and writes
    ``"<url> <digest>\\n"`` for every one that succeeds.

    Per-URL failures (bad URL, transport error, body read error) are dropped:
    the URL is simply missing from the output.

    ``timeout`` caps the whole exchange for one URL, from issuing the request
    to the last body byte. ``None`` means no cap.
    """

    def __init__(
        self,
        transport: Transport,
        parallel_count: int = 10,
        algorithm: str | DigestFactory = DEFAULT_ALGORITHM,
        timeout: float | None = None,
    ) -> None:
        if parallel_count < 1:
            raise ConfigurationError(f"parallel_count must be >= 1, got {parallel_count}")
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {timeout}")
        self._transport = transport
        self._parallel_count = parallel_count
        self._timeout = timeout
        self._digest_factory = resolve_digest_factory(algorithm)

    @property
    def parallel_count(self) -> int:
        return self._parallel_count

    async def run(
        self,
        ctx: RunContext,
        urls: Sequence[str],
        output: OutputSink,
        on_error: ErrorCallback | None = None,
    ) -> RunSummary:
        """Process every URL and write one line per success to ``output``.

        Returns once every input has been written or dropped. Never raises
        for a per-URL failure.
        """
        summary = RunSummary(submitted=len(urls))
        if not urls:
            return summary

        ctx.start()
        size = len(urls)
        jobs: Channel[str] = Channel(size, name="jobs")
        results: Channel[Result] = Channel(size, name="results")
        failures: Counter[str] = Counter()

        def record_failure(err: HashFetchError) -> None:
            failures[type(err).__name__] += 1
            if on_error is not None:
                try:
                    on_error(err)
                except Exception:
                    logger.exception("on_error callback failed for %s", err.url)

        logger.info("Processing %d URL(s) with %d worker(s)", size, self._parallel_count)

        workers = [
            asyncio.create_task(
                self._worker(ctx, jobs, results, record_failure), name=f"hashfetch-worker-{i}"
            )
            for i in range(1, self._parallel_count + 1)
        ]
        seeder = asyncio.create_task(self._seed(urls, jobs), name="hashfetch-seeder")
        supervisor = asyncio.create_task(
            self._supervise(workers, results), name="hashfetch-supervisor"
        )

        try:
            async for result in results:
                output.write(result.line())
                summary.written += 1
        finally:
            pending = [t for t in (seeder, supervisor, *workers) if not t.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(seeder, supervisor, *workers, return_exceptions=True)
            ctx.disarm()

        summary.dropped = summary.submitted - summary.written
        summary.cancelled = ctx.cancelled
        summary.errors = dict(failures)
        logger.info(
            "Done: %d written, %d dropped%s",
            summary.written,
            summary.dropped,
            " (cancelled)" if summary.cancelled else "",
        )
        return summary

    @staticmethod
    async def _seed(urls: Sequence[str], jobs: Channel[str]) -> None:
        try:
            for url in urls:
                await jobs.put(url)
        finally:
            jobs.close()

    @staticmethod
    async def _supervise(workers: list[asyncio.Task[None]], results: Channel[Result]) -> None:
        try:
            outcomes = await asyncio.gather(*workers, return_exceptions=True)
            for task, outcome in zip(workers, outcomes, strict=True):
                if isinstance(outcome, Exception):
                    logger.error("Worker %s crashed: %s", task.get_name(), outcome)
        finally:
            results.close()

    async def _worker(
        self,
        ctx: RunContext,
        jobs: Channel[str],
        results: Channel[Result],
        on_error: ErrorCallback,
    ) -> None:
        async for job in jobs:
            try:
                url = validate_url(job)
                digest = await self._hash_url(ctx, url)
            except HashFetchError as e:
                logger.debug("Dropping %r: %s", job, e)
                if e.url is None:
                    e.url = job
                on_error(e)
                continue
            except Exception as e:
                logger.warning("Dropping %r after unexpected error: %s", job, e)
                on_error(TransportError(f"{type(e).__name__}: {e}", url=job, original=e))
                continue
            await results.put(Result(url=url, digest=digest))

    async def _hash_url(self, ctx: RunContext, url: str) -> str:
        """Fetch ``url`` and return the hex digest of its body."""

        async def fetch_and_hash() -> str:
            request = FetchRequest(method="GET", url=url, context=ctx)
            try:
                body = await self._transport.issue(request)
            except HashFetchError:
                raise
            except Exception as e:
                raise TransportError(f"{type(e).__name__}: {e}", url=url, original=e) from e
            try:
                return await digest_stream(body.aiter_bytes(), self._digest_factory)
            finally:
                try:
                    await body.aclose()
                except Exception as e:
                    # Close errors never change the outcome for this URL.
                    logger.debug("Failed to close body for %s: %s", url, e)

        async def fetch_and_hash_with_deadline() -> str:
            try:
                async with asyncio.timeout(self._timeout):
                    return await fetch_and_hash()
            except TimeoutError as e:
                raise TransportError(
                    f"Timeout after {self._timeout}s", url=url, original=e
                ) from e

        try:
            return await ctx.guard(fetch_and_hash_with_deadline(), url=url)
        except HashFetchError as e:
            if e.url is None:
                e.url = url
            raise
