"""Data models for ingestion."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import Article


class SourceResult(BaseModel):
    """Result of querying one source adapter with one query."""

    source_name: str = Field(..., description="Adapter name")
    query: str = Field(..., description="Query issued")
    success: bool = Field(..., description="Whether the call completed")
    articles: List[Article] = Field(default_factory=list, description="Normalized articles")
    error: Optional[str] = Field(None, description="Error message if failed")
    skipped_items: int = Field(0, description="Items dropped for missing title or URL")

    @property
    def article_count(self) -> int:
        """Number of articles returned."""
        return len(self.articles)
