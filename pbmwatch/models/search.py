"""Search run models."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .article import Article
from .base import RecordModel, utc_now


class LastSearchRecord(RecordModel):
    """Persisted metadata about the most recent completed search."""

    last_search_timestamp: Optional[datetime] = Field(None, description="When the last run finished")
    next_scheduled_search: Optional[datetime] = Field(None, description="When the next run is due")
    articles_found: int = Field(0, ge=0, description="Articles accepted by the last run")
    sources_searched: List[str] = Field(default_factory=list, description="Sources that yielded results")


class SearchRun(RecordModel):
    """Ephemeral bookkeeping for one aggregation run."""

    queries: List[str] = Field(..., description="Queries issued this run")
    started_at: datetime = Field(default_factory=utc_now, description="When the run started")
    accepted_count: int = Field(0, ge=0, description="Articles accepted after filtering")
    sources_with_results: List[str] = Field(default_factory=list)
    failed_sources: List[str] = Field(default_factory=list)


class SearchOutcome(RecordModel):
    """Structured result returned by the manual and scheduled triggers."""

    success: bool = Field(..., description="Whether the run completed")
    articles_found: int = Field(0, ge=0, description="Number of articles returned")
    articles: List[Article] = Field(default_factory=list, description="Ranked articles")
    message: str = Field(..., description="Human-readable summary")
    sources_searched: List[str] = Field(default_factory=list)
    failed_sources: List[str] = Field(default_factory=list)
    fallback_used: bool = Field(False, description="Articles come from the fallback set")
    skipped: bool = Field(False, description="Run skipped because no search was due")
    timestamp: datetime = Field(default_factory=utc_now)
