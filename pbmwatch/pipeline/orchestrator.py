"""Pipeline orchestrator that runs one complete aggregation run."""

import asyncio
import logging
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import Config
from ..curated import curated_articles
from ..ingestion import SourceAdapter, SourceAggregator, SourceResult, build_adapters, collect_articles
from ..models import Article, SearchOutcome, SearchRun, utc_now
from ..ranking import ArticleFilter, ArticleRanker, KeywordScorer, deduplicate
from ..storage import ArticleStore

console = Console()
logger = logging.getLogger(__name__)


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.error: Optional[str] = None
        self.stats: Dict = {}

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, stats: Optional[Dict] = None):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        if stats:
            self.stats.update(stats)

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def build_store(config: Config, clock: Callable[[], datetime] = utc_now) -> ArticleStore:
    """Create the lifecycle store described by the storage config."""
    storage = config.config.storage
    return ArticleStore(
        config.data_dir,
        max_articles=storage.max_articles,
        expiration_days=storage.expiration_days,
        search_interval_days=storage.search_interval_days,
        clock=clock,
    )


def _distinct(names: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen


class SearchOrchestrator:
    """Fan out, filter, deduplicate, rank and store one aggregation run."""

    def __init__(
        self,
        config: Config,
        store: Optional[ArticleStore] = None,
        adapters: Optional[Sequence[SourceAdapter]] = None,
        clock: Callable[[], datetime] = utc_now,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize search orchestrator.

        Args:
            config: Configuration manager
            store: Lifecycle store; built from the storage config when omitted
            adapters: Adapters in priority order; built from the sources config when omitted
            clock: Source of "now" (UTC-aware)
            transport: Optional httpx transport handed to built adapters
        """
        self.config = config
        self.clock = clock
        self.store = store or build_store(config, clock)
        if adapters is None:
            adapters = build_adapters(config, transport=transport, clock=clock)
        self.adapters = list(adapters)
        self.stages: List[PipelineStage] = []
        self.last_run: Optional[SearchRun] = None
        self.results: List[SourceResult] = []
        self.total_start_time: Optional[float] = None

    def _new_stages(self) -> List[PipelineStage]:
        return [
            PipelineStage("fetch", "Querying sources"),
            PipelineStage("filter", "Applying trust and relevance filter"),
            PipelineStage("dedupe", "Removing duplicate URLs"),
            PipelineStage("rank", "Scoring and ranking articles"),
            PipelineStage("store", "Merging into the article store"),
        ]

    def _stage(self, name: str) -> PipelineStage:
        for stage in self.stages:
            if stage.name == name:
                return stage
        raise KeyError(name)

    def _fallback(self, run: SearchRun, message: str) -> SearchOutcome:
        """Outcome for a failed run: persisted articles, else the curated list."""
        articles = self.store.load_all()
        if articles:
            message = f"{message}; returning {len(articles)} stored articles"
        else:
            settings = self.config.config
            articles = ArticleRanker(
                KeywordScorer(settings.filter.relevance_keywords), settings.ranking
            ).rank(curated_articles(now=self.clock(), expiration_days=settings.storage.expiration_days))
            message = f"{message}; returning {len(articles)} curated articles"

        logger.warning(message)
        return SearchOutcome(
            success=False,
            articles_found=len(articles),
            articles=articles,
            message=message,
            sources_searched=run.sources_with_results,
            failed_sources=run.failed_sources,
            fallback_used=True,
            timestamp=self.clock(),
        )

    async def run_async(self, queries: Optional[Sequence[str]] = None) -> SearchOutcome:
        """
        Run the complete pipeline.

        Never raises; failures are reported through the returned outcome.
        """
        self.total_start_time = time.time()
        self.stages = self._new_stages()
        self.results = []

        if queries is None:
            queries = self.config.config.search.queries
        run = SearchRun(queries=list(queries), started_at=self.clock())
        self.last_run = run

        try:
            return await self._execute_pipeline(run)
        except Exception as e:
            logger.exception("Search run failed")
            for stage in self.stages:
                if stage.start_time and not stage.end_time:
                    stage.fail(str(e))
            return self._fallback(run, f"Search failed: {e}")

    def run(self, queries: Optional[Sequence[str]] = None) -> SearchOutcome:
        """Synchronous wrapper for run_async."""
        return asyncio.run(self.run_async(queries))

    async def _execute_pipeline(self, run: SearchRun) -> SearchOutcome:
        """Execute the pipeline stages."""
        settings = self.config.config

        # Stage 1: fan out every (adapter, query) call
        stage = self._stage("fetch")
        stage.start()
        aggregator = SourceAggregator(self.adapters, max_concurrent=settings.search.max_concurrent)
        results = await aggregator.search_all(run.queries)
        self.results = results

        run.sources_with_results = _distinct([r.source_name for r in results if r.success and r.articles])
        run.failed_sources = _distinct([r.source_name for r in results if not r.success])

        if not results:
            stage.fail("No sources enabled")
            return self._fallback(run, "No sources enabled")
        if not any(r.success for r in results):
            stage.fail("All sources failed")
            return self._fallback(run, "All sources failed")

        fetched = collect_articles(results)
        stage.complete({
            "calls": len(results),
            "failed": sum(1 for r in results if not r.success),
            "articles": len(fetched),
        })

        # Stage 2: trust and relevance
        stage = self._stage("filter")
        stage.start()
        accepted = ArticleFilter(settings.filter).filter(fetched)
        run.accepted_count = len(accepted)
        stage.complete({"accepted": len(accepted), "rejected": len(fetched) - len(accepted)})

        # Stage 3: dedupe by URL, first seen wins
        stage = self._stage("dedupe")
        stage.start()
        unique = deduplicate(accepted)
        stage.complete({"unique": len(unique), "duplicates": len(accepted) - len(unique)})

        # Stage 4: score and rank
        stage = self._stage("rank")
        stage.start()
        ranker = ArticleRanker(KeywordScorer(settings.filter.relevance_keywords), settings.ranking)
        ranked = ranker.rank(unique)
        stage.complete({"ranked": len(ranked)})

        # Stage 5: merge into the store
        stage = self._stage("store")
        stage.start()
        stored = self.store.merge_and_save(ranked)
        stage.complete({"stored": len(stored)})

        message = (
            f"Found {len(ranked)} articles from {len(run.sources_with_results)} sources"
            f" ({len(stored)} stored)"
        )
        logger.info(message)
        return SearchOutcome(
            success=True,
            articles_found=len(ranked),
            articles=ranked,
            message=message,
            sources_searched=run.sources_with_results,
            failed_sources=run.failed_sources,
            timestamp=self.clock(),
        )

    def print_summary(self, outcome: SearchOutcome) -> None:
        """Print pipeline execution summary."""
        total_duration = time.time() - self.total_start_time if self.total_start_time else 0

        table = Table(title="Search Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages:
            if stage.start_time is None:
                status = "[dim]-[/dim]"
            else:
                status = "[green]✓[/green]" if stage.success else "[red]✗[/red]"
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"

            details = ""
            if stage.success and stage.stats:
                if stage.name == "fetch":
                    details = f"{stage.stats.get('calls', 0)} calls, {stage.stats.get('articles', 0)} articles"
                elif stage.name == "filter":
                    details = f"{stage.stats.get('accepted', 0)} accepted, {stage.stats.get('rejected', 0)} rejected"
                elif stage.name == "dedupe":
                    details = f"{stage.stats.get('duplicates', 0)} duplicates removed"
                elif stage.name == "rank":
                    details = f"{stage.stats.get('ranked', 0)} ranked"
                elif stage.name == "store":
                    details = f"{stage.stats.get('stored', 0)} stored"
            elif stage.error:
                details = stage.error

            table.add_row(stage.name.title(), status, duration, details)

        console.print("\n")
        console.print(table)

        if outcome.success:
            console.print(Panel(
                f"[green]Search completed[/green]\n\n"
                f"{outcome.message}\n"
                f"Duration: {total_duration:.1f} seconds\n"
                f"Sources with results: {', '.join(outcome.sources_searched) or '-'}",
                style="green",
            ))
        else:
            console.print(Panel(
                f"[red]Search failed[/red]\n\n"
                f"{outcome.message}\n"
                f"Failed sources: {', '.join(outcome.failed_sources) or '-'}",
                style="red",
            ))


def print_articles(articles: List[Article], title: str = "Articles") -> None:
    """Print articles as a table."""
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="yellow")
    table.add_column("Source", style="cyan")
    table.add_column("Year", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("PT", justify="center")

    for i, article in enumerate(articles, 1):
        table.add_row(
            str(i),
            article.title,
            article.source,
            article.publication_date or "-",
            str(article.relevance_score),
            "✓" if article.is_portuguese else "",
        )

    console.print(table)
