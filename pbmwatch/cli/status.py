"""Status command implementation."""

import pendulum
import typer
from rich.console import Console
from rich.panel import Panel

from ..pipeline import print_articles
from ..service import get_status
from .common import get_config

console = Console()


def _format_time(value) -> str:
    if value is None:
        return "never"
    moment = pendulum.instance(value)
    return f"{moment.format('YYYY-MM-DD HH:mm')} UTC ({moment.diff_for_humans()})"


def status_command(ctx: typer.Context) -> None:
    """Show the last search and the stored articles."""
    config = get_config(ctx)
    status = get_status(config)
    last = status["last_search"]

    console.print(Panel(
        f"Last search: {_format_time(last.last_search_timestamp)}\n"
        f"Next scheduled: {_format_time(last.next_scheduled_search)}\n"
        f"Search due: {'yes' if status['needs_new_search'] else 'no'}\n"
        f"Articles found last run: {last.articles_found}\n"
        f"Sources: {', '.join(last.sources_searched) or '-'}\n"
        f"Stored articles: {status['articles_count']} ({len(status['weekly_articles'])} this week)\n"
        f"Recipients: {', '.join(status['recipients']) or '-'}",
        title="Bloodless Medicine Monitor",
        style="blue",
    ))

    if status["articles"]:
        print_articles(status["articles"], title="Stored Articles")
