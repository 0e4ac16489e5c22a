"""Init command implementation."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, default_config_path, save_config

console = Console()


def init_command(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Directory for persisted articles (default: ~/.local/share/pbmwatch)",
    ),
    recipients: Optional[List[str]] = typer.Option(
        None,
        "--recipient",
        "-r",
        help="Report recipient (repeatable)",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
) -> None:
    """Write a default configuration file."""
    console.print(Panel.fit("Bloodless Medicine Monitor - Initialization", style="bold blue"))

    config_path = (ctx.obj or {}).get("config_path") or default_config_path()
    if config_path.exists() and not force:
        console.print(f"[red]Config already exists: {config_path} (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    config = ConfigModel()
    if data_dir is not None:
        config.storage.data_dir = str(data_dir)
    if recipients:
        config.email.recipients = list(recipients)

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    storage_dir = Path(config.storage.data_dir).expanduser()
    storage_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"✅ Created data directory: {storage_dir}")

    console.print(
        Panel(
            f"[green]✅ Bloodless Medicine Monitor initialized![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Data: {storage_dir}\n"
            f"Sources: {len(config.sources)} ({sum(1 for s in config.sources if s.enabled)} enabled)\n\n"
            f"Next steps:\n"
            f"1. Set the email API key: [bold]export {config.email.api_key_env}=your_key[/bold]\n"
            f"2. Run: [bold]pbmwatch search[/bold]\n"
            f"3. Schedule weekly: [bold]pbmwatch cron --if-due --send-email[/bold]",
            style="green",
        )
    )
