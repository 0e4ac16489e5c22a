"""Sources inspection commands."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..ingestion import ADAPTERS, build_adapters
from .common import get_config

console = Console()
sources_app = typer.Typer(help="Inspect literature sources")


@sources_app.command("list")
def sources_list(ctx: typer.Context) -> None:
    """List configured sources in priority order."""
    config = get_config(ctx)
    sources = config.config.sources

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("Timeout", style="green")
    table.add_column("Max results", style="green")
    table.add_column("Endpoint", style="blue")

    for i, source in enumerate(sources, 1):
        adapter_cls = ADAPTERS.get(source.name)
        endpoint = source.base_url or (adapter_cls.default_url if adapter_cls else "[red]unknown source[/red]")
        table.add_row(
            str(i),
            source.name,
            "✓" if source.enabled else "✗",
            f"{source.timeout:g}s",
            str(source.max_results),
            endpoint,
        )

    console.print(table)


@sources_app.command("test")
def sources_test(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
    query: str = typer.Option(
        "patient blood management",
        "--query",
        "-q",
        help="Probe query",
    ),
) -> None:
    """Run a test query against each enabled source."""
    config = get_config(ctx)
    adapters = build_adapters(config)

    if name:
        adapters = [a for a in adapters if a.name == name]
        if not adapters:
            console.print(f"[red]Source '{name}' not found or disabled.[/red]")
            raise typer.Exit(1)

    async def check_all():
        return await asyncio.gather(*(adapter.search(query) for adapter in adapters))

    results = asyncio.run(check_all())
    for result in results:
        if result.success:
            console.print(f"[green]✅ {result.source_name}: OK ({result.article_count} articles)[/green]")
        else:
            console.print(f"[red]❌ {result.source_name}: Failed - {result.error}[/red]")

    if not any(r.success for r in results):
        raise typer.Exit(1)
