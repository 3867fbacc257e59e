"""Run a chain of importable handlers from the command line."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from loguru import logger
from rich.table import Table

from handlerchain import __logo__
from handlerchain.core.chain import process_middleware
from handlerchain.core.errors import (
    ConfigError,
    HandlerResolutionError,
    MiddlewareNextError,
    as_coded_error,
)
from handlerchain.telemetry import InMemoryTelemetry
from handlerchain.utils.helpers import parse_pairs, resolve_handler
from handlerchain.utils.logging import configure_logging

from .core import app, console


@app.command()
def run(
    handlers: list[str] = typer.Argument(..., help="Handlers as module:attribute, in order"),
    context: list[str] = typer.Option(None, "--context", "-c", help="Initial context key=value"),
    arg: list[str] = typer.Option(None, "--arg", "-a", help="Initial argument key=value"),
    config_path: Path | None = typer.Option(None, "--config", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", help="Log every advance"),
) -> None:
    """Run HANDLERS as one chain and show the resulting context."""
    from handlerchain.config.loader import load_config

    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    configure_logging(config.logging, verbose=verbose)

    try:
        chain = [resolve_handler(path) for path in handlers]
        ctx: dict[str, object] = dict(parse_pairs(context))
        initial_args = parse_pairs(arg)
    except (HandlerResolutionError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    telemetry = InMemoryTelemetry() if config.telemetry.enabled else None
    finished = False

    def last() -> None:
        nonlocal finished
        finished = True

    try:
        asyncio.run(
            process_middleware(
                chain,
                initial_args,
                ctx,
                None,
                logger.bind(component="cli"),
                last,
                telemetry=telemetry,
                drain_unawaited=config.drain_unawaited,
            )
        )
    except MiddlewareNextError as e:
        console.print(f"[red]{e.code}: {e}[/red]")
        raise typer.Exit(2) from e
    except Exception as e:
        coded = as_coded_error(e)
        console.print(f"[red]{coded.code}: {coded}[/red]")
        raise typer.Exit(1) from e

    console.print(f"{__logo__} Ran {len(chain)} handler(s)")
    status = "[green]✓[/green]" if finished else "[yellow]halted[/yellow]"
    console.print(f"Terminal handler: {status}")

    table = Table(title="Context")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in ctx.items():
        table.add_row(str(key), repr(value))
    console.print(table)

    if telemetry is not None:
        metrics = Table(title="Metrics")
        metrics.add_column("Metric", style="cyan")
        metrics.add_column("Value", justify="right")
        for key, value in telemetry.snapshot().items():
            metrics.add_row(key, str(value))
        console.print(metrics)
