"""Data models for the Bloodless Medicine Monitor."""

from .article import ARTICLE_EXPIRATION_DAYS, Article, generate_id
from .base import RecordModel, ensure_utc, utc_now
from .search import LastSearchRecord, SearchOutcome, SearchRun

__all__ = [
    "ARTICLE_EXPIRATION_DAYS",
    "Article",
    "LastSearchRecord",
    "RecordModel",
    "SearchOutcome",
    "SearchRun",
    "ensure_utc",
    "generate_id",
    "utc_now",
]
