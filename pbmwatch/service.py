"""Entry points behind the manual trigger, scheduled trigger, status query and email dispatch."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from .config import Config, EmailConfig
from .models import Article, SearchOutcome, utc_now
from .pipeline import SearchOrchestrator, build_store
from .reporting import DispatchResult, EmailDispatcher
from .storage import ArticleStore

logger = logging.getLogger(__name__)


def _setup_failure(error: Exception) -> SearchOutcome:
    logger.error("Could not set up search: %s", error)
    return SearchOutcome(success=False, message=f"Search setup failed: {error}")


def manual_search(
    config: Config,
    queries: Optional[Sequence[str]] = None,
    orchestrator: Optional[SearchOrchestrator] = None,
) -> SearchOutcome:
    """Run one aggregation run on demand."""
    if orchestrator is None:
        try:
            orchestrator = SearchOrchestrator(config)
        except Exception as e:
            return _setup_failure(e)
    return orchestrator.run(queries)


def scheduled_search(
    config: Config,
    only_if_due: bool = False,
    orchestrator: Optional[SearchOrchestrator] = None,
) -> SearchOutcome:
    """
    Run the weekly aggregation.

    With ``only_if_due`` the run is skipped when the last search is still
    within the search interval; the stored articles are returned instead.
    """
    if orchestrator is None:
        try:
            orchestrator = SearchOrchestrator(config)
        except Exception as e:
            return _setup_failure(e)
    store = orchestrator.store

    if only_if_due and not store.needs_new_search():
        articles = store.load_all()
        last = store.read_last_search()
        next_due = last.next_scheduled_search.isoformat() if last.next_scheduled_search else "unknown"
        logger.info("Search not due until %s, skipping", next_due)
        return SearchOutcome(
            success=True,
            articles_found=len(articles),
            articles=articles,
            message=f"Search not due until {next_due}; {len(articles)} stored articles",
            skipped=True,
            timestamp=orchestrator.clock(),
        )

    return orchestrator.run()


def get_status(
    config: Config,
    store: Optional[ArticleStore] = None,
    clock: Callable[[], datetime] = utc_now,
) -> Dict[str, Any]:
    """Read-only snapshot of the last search and the stored articles."""
    store = store or build_store(config, clock)
    status = store.status()
    status["weekly_articles"] = store.recent_articles(days=7)
    status["needs_new_search"] = store.needs_new_search()
    status["recipients"] = list(config.config.email.recipients)
    return status


def send_report(
    config: Config,
    articles: Optional[List[Article]] = None,
    recipients: Optional[Sequence[str]] = None,
    store: Optional[ArticleStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DispatchResult:
    """Email a report of ``articles`` (the stored articles by default)."""
    try:
        if articles is None:
            articles = (store or build_store(config)).load_all()
        email_config = EmailConfig.model_validate(config.get_email_config())
        dispatcher = EmailDispatcher(email_config, transport=transport)
        return asyncio.run(dispatcher.dispatch(articles, recipients))
    except Exception as e:
        logger.exception("Email dispatch failed")
        return DispatchResult(
            status="failed",
            articles_count=len(articles or []),
            message=f"Email dispatch failed: {e}",
        )
