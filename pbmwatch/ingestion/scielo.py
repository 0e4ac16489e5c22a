"""SciELO adapter (search.scielo.org RSS output)."""

from typing import List, Optional

import httpx

from ..models import Article
from .base import SourceAdapter
from .feeds import entry_date, entry_language, entry_summary, parse_feed
from .normalize import host_label

# Wider ranges are left unfiltered rather than sending one parameter per year.
MAX_YEAR_FILTER_SPAN = 30


class SciELOAdapter(SourceAdapter):
    """Search SciELO, the Latin American open-access collection."""

    name = "scielo"
    label = ""
    default_url = "https://search.scielo.org/"
    markup = True

    def __init__(self, interface_language: str = "pt", **kwargs) -> None:
        """Initialize SciELO adapter."""
        super().__init__(**kwargs)
        self.interface_language = interface_language

    def build_params(self, query: str) -> dict:
        params = {
            "q": query,
            "lang": self.interface_language,
            "count": self.max_results,
            "from": 1,
            "output": "rss",
        }
        if self.has_year_filter:
            start, end = self.year_bounds()
            if end - start < MAX_YEAR_FILTER_SPAN:
                params["filter[year_cluster][]"] = [str(y) for y in range(start, end + 1)]
        return params

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        response = await client.get(self.base_url, params=self.build_params(query))
        response.raise_for_status()
        return self._parse_items(parse_feed(response.text)[: self.max_results])

    def _parse_item(self, entry) -> Optional[Article]:
        link = entry.get("link")
        return self._build_article(
            title=entry.get("title"),
            url=link,
            source=host_label(link),
            snippet=entry_summary(entry),
            language=entry_language(entry),
            publication_date=entry_date(entry),
            has_full_text=True,
        )
