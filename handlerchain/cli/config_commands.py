"""Configuration CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from handlerchain.core.errors import ConfigError

from .core import app, console


@app.command("config")
def show_config(
    config_path: Path | None = typer.Option(None, "--config", help="Config file path"),
) -> None:
    """Print the effective settings as JSON."""
    from handlerchain.config.loader import convert_to_camel, get_config_path, load_config

    path = config_path or get_config_path()
    try:
        config = load_config(path)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[dim]{path}{'' if path.exists() else ' (not found, defaults)'}[/dim]")
    console.print_json(json.dumps(convert_to_camel(config.model_dump(mode="json"))))
