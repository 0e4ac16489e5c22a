"""Main CLI application."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from ..log import setup_logging
from .email import email_command
from .init import init_command
from .search import cron_command, search_command
from .sources import sources_app
from .status import status_command

app = typer.Typer(
    name="pbmwatch",
    help="Bloodless Medicine Monitor - literature aggregation and weekly reports",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: $PBMWATCH_CONFIG or ~/.config/pbmwatch/config.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Bloodless Medicine Monitor."""
    setup_logging(verbose)
    ctx.obj = {"config_path": config_path}


# Register commands
app.command("init")(init_command)
app.command("search")(search_command)
app.command("cron")(cron_command)
app.command("status")(status_command)
app.command("email")(email_command)
app.add_typer(sources_app, name="sources", help="Inspect literature sources")


if __name__ == "__main__":
    app()
