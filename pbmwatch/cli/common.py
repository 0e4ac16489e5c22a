"""Helpers shared by CLI commands."""

import typer
from rich.console import Console

from ..config import Config

console = Console()


def get_config(ctx: typer.Context) -> Config:
    """Build the config manager for the --config option and check it loads."""
    config_path = (ctx.obj or {}).get("config_path")
    config = Config(config_path)
    try:
        config.config
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return config
