"""Click CLI for hashfetch — fetch URLs and print the digest of each body."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
from typing import TextIO

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from hashfetch.config.hierarchy import build_processor_config, load_config_hierarchy
from hashfetch.errors.exceptions import ConfigurationError
from hashfetch.types import RunSummary

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(str(default_level).upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
        force=True,
    )


class DefaultRunGroup(click.Group):
    """Group that treats anything that isn't a subcommand as ``run`` arguments.

    ``hashfetch -p 2 example.com`` is the same as ``hashfetch run -p 2 example.com``.
    """

    default_command = "run"
    _group_options = ("--help", "--version")

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args or (args[0] not in self.commands and args[0] not in self._group_options):
            args = [self.default_command, *args]
        return super().parse_args(ctx, args)


@click.group(cls=DefaultRunGroup)
@click.version_option(package_name="hashfetch")
def cli() -> None:
    """hashfetch — fetch URLs in parallel and print a digest of each response body.

    Without a subcommand, arguments go to ``run``.
    """


@cli.command()
@click.argument("urls", nargs=-1)
@click.option(
    "-p", "--parallel", type=click.IntRange(min=1), default=None,
    help="Number of parallel requests (default 10).",
)
@click.option("-a", "--algorithm", type=str, default=None, help="Digest algorithm (default md5).")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Per-request timeout in seconds.")
@click.option("-i", "--input", "input_file", type=click.File("r"), default=None,
              help="Read URLs from a file, one per line ('-' for stdin).")
@click.option("-o", "--output", type=click.File("w"), default="-", help="Output file path.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def run(
    urls: tuple[str, ...],
    parallel: int | None,
    algorithm: str | None,
    timeout: float | None,
    input_file: TextIO | None,
    output: TextIO,
    verbose: int,
) -> None:
    """Fetch URLS and print "<url> <digest>" for each one that succeeds."""
    merged = load_config_hierarchy(parallel=parallel, algorithm=algorithm, timeout=timeout)
    _setup_logging(verbose, merged.get("log_level", "WARNING"))

    try:
        config = build_processor_config(merged)
    except ConfigurationError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(2)

    url_list = list(urls)
    if input_file is not None:
        url_list.extend(line.strip() for line in input_file if line.strip())

    from hashfetch.context import RunContext
    from hashfetch.core import process_urls_async

    async def _run() -> RunSummary:
        ctx = RunContext()
        loop = asyncio.get_running_loop()

        def _on_signal() -> None:
            error_console.print("Ctrl+C pressed. Cancelling...")
            ctx.cancel("interrupted")

        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
                loop.add_signal_handler(sig, _on_signal)
                installed.append(sig)
        try:
            return await process_urls_async(url_list, output, config=config, ctx=ctx)
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)

    try:
        summary = asyncio.run(_run())
    except ConfigurationError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(2)
    output.flush()

    if verbose >= 1:
        _print_summary(summary, config)


def _print_summary(summary: object, config: object) -> None:
    """Print a run summary."""
    from hashfetch.types import ProcessorConfig

    if not isinstance(summary, RunSummary) or not isinstance(config, ProcessorConfig):
        return

    error_console.print()
    table = Table(title="Run Summary", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Workers", str(config.parallel))
    table.add_row("Algorithm", config.algorithm)
    table.add_row("Submitted", str(summary.submitted))
    table.add_row("Written", f"[green]{summary.written}[/green]")
    table.add_row("Dropped", f"[yellow]{summary.dropped}[/yellow]" if summary.dropped else "0")
    for name, count in sorted(summary.errors.items()):
        table.add_row(f"  {name}", str(count))
    if summary.cancelled:
        table.add_row("Cancelled", "[yellow]yes[/yellow]")

    error_console.print(table)


@cli.command("algorithms")
def list_algorithms() -> None:
    """List available digest algorithms."""
    from hashfetch.digest import DEFAULT_ALGORITHM, available_algorithms, new_accumulator

    table = Table(title="Available Algorithms", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Digest bits")
    table.add_column("Default")

    for name in available_algorithms():
        try:
            size = new_accumulator(name).digest_size * 8  # type: ignore[attr-defined]
        except ConfigurationError:
            continue
        table.add_row(name, str(size), "yes" if name == DEFAULT_ALGORITHM else "")

    console.print(table)


@cli.command("validate")
@click.argument("urls", nargs=-1, required=True)
def validate(urls: tuple[str, ...]) -> None:
    """Show how each URL would be normalized, without fetching it."""
    from hashfetch.errors.exceptions import InvalidURLError
    from hashfetch.urls import validate_url

    failed = False
    for raw in urls:
        try:
            normalized = validate_url(raw)
            console.print(f"[green]ok[/green]      {escape(repr(raw))} -> {escape(normalized)}")
        except InvalidURLError as e:
            failed = True
            console.print(f"[red]invalid[/red] {escape(repr(raw))}: {escape(str(e))}")
    if failed:
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli()
