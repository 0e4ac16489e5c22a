"""Article model: the unit of record."""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from .base import RecordModel, ensure_utc, utc_now

ARTICLE_EXPIRATION_DAYS = 30


def generate_id() -> str:
    """Opaque identifier assigned at ingestion."""
    return uuid.uuid4().hex


class Article(RecordModel):
    """A normalized literature article."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_id, description="Opaque ingestion ID")
    title: str = Field(..., min_length=1, description="Display title")
    url: str = Field(..., description="Canonical absolute http(s) URL")
    source: str = Field(..., description="Provider or host label")
    snippet: str = Field("", description="Truncated abstract or summary")
    publication_date: Optional[str] = Field(None, description="Year or year-month-day")
    language: Optional[str] = Field(None, description="ISO-639-1 language code")
    is_portuguese: bool = Field(False, description="Portuguese-language article")
    citation_count: Optional[int] = Field(None, ge=0, description="Citation count if known")
    has_full_text: Optional[bool] = Field(None, description="Full text freely available")
    is_preprint: Optional[bool] = Field(None, description="Not yet peer reviewed")
    relevance_score: int = Field(0, ge=0, description="Matched relevance keywords")
    date_found: datetime = Field(default_factory=utc_now, description="Ingestion timestamp")
    expires_at: datetime = Field(..., description="Purge deadline")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Titles must contain something besides whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Title must not be blank")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """URLs must be absolute http(s) locators."""
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(f"URL must be absolute http(s): {v!r}")
        return v

    @field_validator("date_found", "expires_at")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        """Store all timestamps as UTC-aware."""
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_expiration(self) -> "Article":
        """Expiration must come strictly after ingestion."""
        if self.expires_at <= self.date_found:
            raise ValueError("expiresAt must be later than dateFound")
        return self

    @classmethod
    def create(
        cls,
        title: str,
        url: str,
        source: str,
        now: Optional[datetime] = None,
        expiration_days: int = ARTICLE_EXPIRATION_DAYS,
        **fields,
    ) -> "Article":
        """Build a freshly ingested article stamped with its expiration."""
        found = ensure_utc(now) if now is not None else utc_now()
        return cls(
            title=title,
            url=url,
            source=source,
            date_found=found,
            expires_at=found + timedelta(days=expiration_days),
            **fields,
        )

    def is_expired(self, now: datetime) -> bool:
        """Check whether the article is past its expiration."""
        return ensure_utc(now) >= self.expires_at

    @property
    def text(self) -> str:
        """Title and snippet combined, used for keyword matching."""
        return f"{self.title} {self.snippet}".strip()
