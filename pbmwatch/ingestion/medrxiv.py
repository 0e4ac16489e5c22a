"""medRxiv adapter.

medRxiv has no keyword search API, so this adapter reads the subject RSS
feeds (one request per configured subject, shared across queries) and
keeps entries that match the query terms locally.
"""

import asyncio
import logging
import re
import time
from typing import Dict, List, Optional, Tuple

import httpx

from ..models import Article
from .base import SourceAdapter
from .feeds import entry_date, entry_summary, parse_feed
from .normalize import clean_text, extract_year

logger = logging.getLogger(__name__)

DEFAULT_SUBJECTS = ["Hematology"]
FEED_TTL_SECONDS = 600

_TERM_RE = re.compile(r"[^\W\d_]{4,}", re.UNICODE)


def query_terms(query: str) -> List[str]:
    """Significant lower-case words of a query."""
    terms = []
    for term in _TERM_RE.findall(query.lower()):
        if term not in terms:
            terms.append(term)
    return terms


def matches_query(text: str, terms: List[str]) -> bool:
    """At least half of the query terms appear in the text."""
    if not terms:
        return True
    text = text.lower()
    hits = sum(1 for term in terms if term in text)
    return hits * 2 >= len(terms)


class MedRxivAdapter(SourceAdapter):
    """Filter medRxiv subject feeds by query terms.

    Each subject feed is downloaded once and shared by every query of a run;
    the copy is kept for ``feed_ttl`` seconds.
    """

    name = "medrxiv"
    label = "medrxiv.org"
    default_url = "https://connect.medrxiv.org/medrxiv_xml.php"

    def __init__(
        self,
        subjects: Optional[List[str]] = None,
        feed_ttl: float = FEED_TTL_SECONDS,
        **kwargs,
    ) -> None:
        """Initialize medRxiv adapter."""
        super().__init__(**kwargs)
        self.subjects = subjects or list(DEFAULT_SUBJECTS)
        self.feed_ttl = feed_ttl
        self._feeds: Dict[str, Tuple[float, list]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_loop = None

    def _in_year_range(self, publication_date: Optional[str]) -> bool:
        if not self.has_year_filter:
            return True
        year = extract_year(publication_date)
        start, end = self.year_bounds()
        return year == 0 or start <= year <= end

    def _subject_lock(self, subject: str) -> asyncio.Lock:
        # Locks belong to one event loop; each run gets a fresh set
        loop = asyncio.get_running_loop()
        if loop is not self._lock_loop:
            self._lock_loop = loop
            self._locks = {}
        return self._locks.setdefault(subject, asyncio.Lock())

    async def subject_entries(self, client: httpx.AsyncClient, subject: str) -> list:
        """Entries of a subject feed, fetched at most once per ``feed_ttl``."""
        async with self._subject_lock(subject):
            cached = self._feeds.get(subject)
            now = time.monotonic()
            if cached is not None and now - cached[0] < self.feed_ttl:
                return cached[1]

            response = await client.get(self.base_url, params={"subject": subject})
            response.raise_for_status()
            entries = parse_feed(response.text)
            self._feeds[subject] = (now, entries)
            return entries

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        terms = query_terms(query)
        items = []
        seen_links = set()

        for subject in self.subjects:
            entries = await self.subject_entries(client, subject)
            for entry in entries:
                try:
                    title = clean_text(entry.get("title"), markup=True)
                    summary = clean_text(entry_summary(entry), markup=True)
                    link = entry.get("link")
                    published = entry_date(entry)
                except (ValueError, TypeError, AttributeError) as e:
                    logger.debug("medrxiv skipped malformed entry: %s", e)
                    items.append(None)
                    continue
                if link in seen_links or not matches_query(f"{title} {summary}", terms):
                    continue
                if not self._in_year_range(published):
                    continue
                seen_links.add(link)
                items.append(self._build_article(
                    title=title,
                    url=link,
                    snippet=summary,
                    publication_date=published,
                    has_full_text=True,
                    is_preprint=True,
                ))
                if len(items) >= self.max_results:
                    return items
        return items
