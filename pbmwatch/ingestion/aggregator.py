"""Concurrent fan-out of queries across source adapters."""

import asyncio
import logging
from typing import List, Sequence

from rich.console import Console

from ..models import Article
from .base import SourceAdapter
from .models import SourceResult

console = Console()
logger = logging.getLogger(__name__)


class SourceAggregator:
    """Query every adapter with every query concurrently."""

    def __init__(self, adapters: Sequence[SourceAdapter], max_concurrent: int = 8) -> None:
        """
        Initialize source aggregator.

        Args:
            adapters: Adapters in priority order (highest-trust first)
            max_concurrent: Upper bound on simultaneous outbound calls
        """
        self.adapters = list(adapters)
        self.max_concurrent = max_concurrent

    async def search_all(self, queries: Sequence[str]) -> List[SourceResult]:
        """
        Fan out all (adapter, query) calls and wait for the whole batch.

        Returns:
            Results ordered by adapter priority, then query order, regardless
            of completion order.
        """
        pairs = [(adapter, query) for adapter in self.adapters for query in queries]
        if not pairs:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def search_with_semaphore(adapter: SourceAdapter, query: str) -> SourceResult:
            async with semaphore:
                return await adapter.search(query)

        tasks = [search_with_semaphore(adapter, query) for adapter, query in pairs]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results = []
        for (adapter, query), outcome in zip(pairs, outcomes):
            if isinstance(outcome, BaseException):
                # Adapters guard themselves; this covers subclasses that override search()
                logger.warning("%s raised for %r: %s", adapter.name, query, outcome)
                outcome = SourceResult(
                    source_name=adapter.name,
                    query=query,
                    success=False,
                    error=f"Unexpected error: {outcome}",
                )
            results.append(outcome)

        logger.info(
            "Fetched %d articles from %d calls (%d failed)",
            sum(r.article_count for r in results),
            len(results),
            sum(1 for r in results if not r.success),
        )
        return results


def collect_articles(results: Sequence[SourceResult]) -> List[Article]:
    """Flatten results, keeping their priority order."""
    articles = []
    for result in results:
        articles.extend(result.articles)
    return articles


def print_source_summary(results: Sequence[SourceResult]) -> None:
    """Print summary of source fetch results."""
    total_items = sum(r.article_count for r in results)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print("\n[bold]Source Summary:[/bold]")
    console.print(f"  Calls made: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total articles: {total_items}")

    if failed > 0:
        console.print("\n[bold red]Failed calls:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.source_name} ({result.query}): {result.error}")
