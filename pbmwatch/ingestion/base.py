"""Base class for literature source adapters."""

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

import httpx
from pydantic import ValidationError

from ..models import ARTICLE_EXPIRATION_DAYS, Article, utc_now
from .models import SourceResult
from .normalize import (
    clean_text,
    detect_portuguese,
    host_label,
    is_http_url,
    language_code,
    truncate_snippet,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "pbmwatch/1.0 (Bloodless Medicine Monitor)"


class SourceAdapter(ABC):
    """Fetch one external search endpoint and normalize it into Articles.

    Subclasses implement ``_search``; any exception it raises is turned into a
    failed ``SourceResult`` so a broken provider only costs its own results.
    """

    name: str = ""
    label: str = ""
    default_url: str = ""
    # Provider sends HTML in titles and abstracts
    markup: bool = False

    def __init__(
        self,
        timeout: float = 10.0,
        max_results: int = 10,
        year_from: Optional[int] = None,
        year_to: Optional[int] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        expiration_days: int = ARTICLE_EXPIRATION_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize source adapter."""
        self.timeout = timeout
        self.max_results = max_results
        self.year_from = year_from
        self.year_to = year_to
        self.api_key = api_key
        self.base_url = base_url or self.default_url
        self.user_agent = user_agent
        self.transport = transport
        self.expiration_days = expiration_days
        self.clock = clock

    @property
    def has_year_filter(self) -> bool:
        """Whether a publication year range is configured."""
        return self.year_from is not None or self.year_to is not None

    def year_bounds(self) -> tuple:
        """Year range with open ends filled in."""
        return (self.year_from or 1800, self.year_to or self.clock().year)

    def _client(self) -> httpx.AsyncClient:
        """Create an HTTP client bound to this adapter's timeout."""
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )

    @abstractmethod
    async def _search(
        self, client: httpx.AsyncClient, query: str
    ) -> List[Optional[Article]]:
        """Issue the provider request(s); None entries mark skipped items."""

    def _parse_item(self, item) -> Optional[Article]:
        """Build an Article from one provider record."""
        raise NotImplementedError

    def _parse_items(self, records) -> List[Optional[Article]]:
        """Parse records one by one; a malformed record only skips itself."""
        if not isinstance(records, list):
            raise ValueError(f"expected a list of records, got {type(records).__name__}")
        items = []
        for record in records:
            try:
                items.append(self._parse_item(record))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.debug("%s skipped malformed item: %s", self.name, e)
                items.append(None)
        return items

    async def search(self, query: str) -> SourceResult:
        """Query the provider, never raising."""
        try:
            async with self._client() as client:
                items = await self._search(client, query)
        except httpx.HTTPStatusError as e:
            error = f"HTTP {e.response.status_code}"
            if e.response.status_code == 429:
                error = "Rate limited (429)"
            elif e.response.status_code >= 500:
                error = f"Server error ({e.response.status_code})"
            return self._failure(query, error)
        except httpx.TimeoutException:
            return self._failure(query, "Request timed out")
        except httpx.HTTPError as e:
            return self._failure(query, f"HTTP error: {e}")
        except (ValueError, KeyError, TypeError, AttributeError, ET.ParseError) as e:
            return self._failure(query, f"Malformed response: {e}")
        except Exception as e:
            return self._failure(query, f"Unexpected error: {e}")

        articles = [a for a in items if a is not None]
        logger.debug("%s returned %d articles for %r", self.name, len(articles), query)
        return SourceResult(
            source_name=self.name,
            query=query,
            success=True,
            articles=articles,
            skipped_items=len(items) - len(articles),
        )

    async def fetch(self, query: str) -> List[Article]:
        """Articles for a query; an empty list when the provider fails."""
        result = await self.search(query)
        return result.articles

    def _failure(self, query: str, error: str) -> SourceResult:
        logger.warning("%s failed for %r: %s", self.name, query, error)
        return SourceResult(
            source_name=self.name,
            query=query,
            success=False,
            error=error,
        )

    def _build_article(
        self,
        title,
        url: Optional[str],
        source: Optional[str] = None,
        snippet="",
        language=None,
        is_portuguese: Optional[bool] = None,
        **fields,
    ) -> Optional[Article]:
        """Build an Article, or None when the item lacks a usable title or URL."""
        title = clean_text(title, markup=self.markup)
        if not title or not is_http_url(url):
            logger.debug("%s skipped item without title or URL: %r", self.name, url)
            return None

        snippet = truncate_snippet(snippet, markup=self.markup)
        code = language_code(language)
        if is_portuguese is None:
            if code:
                is_portuguese = code == "pt"
            else:
                is_portuguese = detect_portuguese(f"{title} {snippet}")
        if code is None and is_portuguese:
            code = "pt"

        try:
            return Article.create(
                title=title,
                url=url,
                source=source or self.label or host_label(url),
                snippet=snippet,
                language=code,
                is_portuguese=is_portuguese,
                now=self.clock(),
                expiration_days=self.expiration_days,
                **fields,
            )
        except ValidationError as e:
            logger.debug("%s skipped invalid item %r: %s", self.name, url, e)
            return None
