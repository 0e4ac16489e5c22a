"""Email command implementation."""

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..pipeline import build_store
from ..reporting import DispatchResult
from ..service import send_report
from .common import get_config

console = Console()


def print_dispatch_result(result: DispatchResult) -> None:
    """Print an email dispatch result."""
    if result.status == "sent":
        console.print(f"[green]✅ {result.message}[/green]")
    elif result.status == "partial":
        console.print(f"[yellow]⚠️  {result.message}[/yellow]")
    elif result.status == "manual":
        console.print(f"[yellow]{result.message}[/yellow]")
    else:
        console.print(f"[red]❌ {result.message}[/red]")

    if result.recipients:
        table = Table(title=result.subject or "Recipients")
        table.add_column("Recipient", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Details", style="dim")
        for r in result.recipients:
            table.add_row(
                r.recipient,
                "[green]✓[/green]" if r.success else "[red]✗[/red]",
                r.message_id or r.error or "",
            )
        console.print(table)

    if result.mailto_link:
        console.print("\n[bold]Compose link:[/bold]")
        console.print(result.mailto_link, soft_wrap=True)


def email_command(
    ctx: typer.Context,
    recipients: Optional[List[str]] = typer.Option(
        None,
        "--to",
        "-t",
        help="Recipient (repeatable, default: configured recipients)",
    ),
    weekly: bool = typer.Option(False, "--weekly", help="Only articles found in the last 7 days"),
) -> None:
    """Email a report of the stored articles."""
    config = get_config(ctx)
    store = build_store(config)

    articles = store.recent_articles(days=7) if weekly else store.load_all()
    result = send_report(config, articles=articles, recipients=recipients or None, store=store)
    print_dispatch_result(result)

    if result.status in ("failed", "partial"):
        raise typer.Exit(1)
