"""Top-level entry points: process_urls(), process_urls_async()."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from hashfetch.context import RunContext
from hashfetch.processor import ErrorCallback, OutputSink, Processor
from hashfetch.transport.httpx_transport import HttpxTransport
from hashfetch.types import ProcessorConfig, RunSummary

logger = logging.getLogger(__name__)


async def process_urls_async(
    urls: Sequence[str],
    output: OutputSink,
    config: ProcessorConfig | None = None,
    ctx: RunContext | None = None,
    on_error: ErrorCallback | None = None,
) -> RunSummary:
    """Hash every URL over HTTP and write result lines to ``output``."""
    config = config or ProcessorConfig()
    ctx = ctx or RunContext()

    async with HttpxTransport(
        timeout=config.timeout,
        follow_redirects=config.follow_redirects,
        user_agent=config.user_agent,
        max_connections=config.parallel,
    ) as transport:
        processor = Processor(
            transport,
            parallel_count=config.parallel,
            algorithm=config.algorithm,
            timeout=config.timeout,
        )
        return await processor.run(ctx, urls, output, on_error=on_error)


# ── Module-level convenience functions ──


def process_urls(
    urls: Sequence[str],
    output: OutputSink,
    parallel: int = 10,
    algorithm: str = "md5",
    timeout: float = 5.0,
) -> RunSummary:
    """Hash every URL over HTTP (sync wrapper)."""
    config = ProcessorConfig(parallel=parallel, algorithm=algorithm, timeout=timeout)
    return asyncio.run(process_urls_async(urls, output, config=config))
