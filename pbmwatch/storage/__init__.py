"""Persistence for the rolling article collection."""

from .store import ARTICLES_FILE, LAST_SEARCH_FILE, ArticleStore

__all__ = ["ARTICLES_FILE", "LAST_SEARCH_FILE", "ArticleStore"]
