"""Filtering, deduplication and ranking of aggregated articles."""

from .dedup import canonical_url_key, deduplicate
from .filters import ArticleFilter, contains_keyword, host_matches
from .ranker import ArticleRanker
from .scorers import KeywordScorer

__all__ = [
    "ArticleFilter",
    "ArticleRanker",
    "KeywordScorer",
    "canonical_url_key",
    "contains_keyword",
    "deduplicate",
    "host_matches",
]
