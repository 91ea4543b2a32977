"""hashfetch — fetch URLs concurrently and digest each response body."""

from hashfetch.context import RunContext
from hashfetch.core import process_urls, process_urls_async
from hashfetch.digest import digest_bytes, digest_stream, new_accumulator
from hashfetch.processor import Processor
from hashfetch.types import FetchRequest, ProcessorConfig, Result, RunSummary
from hashfetch.urls import validate_url

__all__ = [
    "FetchRequest",
    "Processor",
    "ProcessorConfig",
    "Result",
    "RunContext",
    "RunSummary",
    "digest_bytes",
    "digest_stream",
    "new_accumulator",
    "process_urls",
    "process_urls_async",
    "validate_url",
]
