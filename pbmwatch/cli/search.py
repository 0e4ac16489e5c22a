"""Search and cron command implementations."""

from typing import List, Optional

import typer
from rich.console import Console

from ..ingestion import print_source_summary
from ..pipeline import SearchOrchestrator, print_articles
from ..service import scheduled_search, send_report
from .common import get_config
from .email import print_dispatch_result

console = Console()


def search_command(
    ctx: typer.Context,
    queries: Optional[List[str]] = typer.Option(
        None,
        "--query",
        "-q",
        help="Query to run instead of the configured set (repeatable)",
    ),
    show_sources: bool = typer.Option(False, "--sources", help="Show per-call source results"),
) -> None:
    """Run one aggregation run now."""
    config = get_config(ctx)

    try:
        orchestrator = SearchOrchestrator(config)
        with console.status("Searching sources..."):
            outcome = orchestrator.run(queries or None)
    except KeyboardInterrupt:
        console.print("\n[yellow]Search interrupted by user[/yellow]")
        raise typer.Exit(1)

    if show_sources:
        print_source_summary(orchestrator.results)
    orchestrator.print_summary(outcome)
    if outcome.articles:
        print_articles(outcome.articles, title="Fallback Articles" if outcome.fallback_used else "Ranked Articles")

    if not outcome.success:
        raise typer.Exit(1)


def cron_command(
    ctx: typer.Context,
    if_due: bool = typer.Option(
        False,
        "--if-due",
        help="Skip the search when the last one is within the search interval",
    ),
    send_email: bool = typer.Option(
        False,
        "--send-email",
        help="Email the stored articles after searching",
    ),
) -> None:
    """Scheduled weekly run, meant to be invoked by cron."""
    config = get_config(ctx)

    orchestrator = SearchOrchestrator(config)
    outcome = scheduled_search(config, only_if_due=if_due, orchestrator=orchestrator)

    if outcome.skipped:
        console.print(f"[dim]{outcome.message}[/dim]")
    elif outcome.success:
        console.print(f"[green]✅ {outcome.message}[/green]")
    else:
        console.print(f"[red]❌ {outcome.message}[/red]")

    exit_code = 0 if outcome.success else 1

    if send_email:
        articles = orchestrator.store.load_all() or outcome.articles
        result = send_report(config, articles=articles, store=orchestrator.store)
        print_dispatch_result(result)
        if result.status in ("failed", "partial"):
            exit_code = 1

    if exit_code:
        raise typer.Exit(exit_code)
