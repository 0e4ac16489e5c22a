"""DOAJ (Directory of Open Access Journals) adapter."""

from typing import List, Optional
from urllib.parse import quote

import httpx

from ..models import Article
from .base import SourceAdapter
from .normalize import language_codes


class DOAJAdapter(SourceAdapter):
    """Search open-access articles indexed by DOAJ."""

    name = "doaj"
    label = "doaj.org"
    default_url = "https://doaj.org/api/search/articles"
    markup = True

    def build_query(self, query: str) -> str:
        """Append the DOAJ (Elasticsearch query string) year filter."""
        if not self.has_year_filter:
            return query
        start, end = self.year_bounds()
        return f"({query}) AND bibjson.year:[{start} TO {end}]"

    @staticmethod
    def article_url(item: dict, bibjson: dict) -> Optional[str]:
        """DOAJ landing page, falling back to the full-text link."""
        if item.get("id"):
            return f"https://doaj.org/article/{item['id']}"
        for link in bibjson.get("link") or []:
            if isinstance(link, dict) and link.get("url"):
                return link["url"]
        return None

    @staticmethod
    def publication_date(bibjson: dict) -> Optional[str]:
        year = bibjson.get("year")
        if not year:
            return None
        month = str(bibjson.get("month") or "")
        if month.isdigit():
            return f"{year}-{month.zfill(2)}"
        return str(year)

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        url = f"{self.base_url}/{quote(self.build_query(query), safe='')}"
        response = await client.get(url, params={"pageSize": self.max_results, "page": 1})
        response.raise_for_status()
        return self._parse_items(response.json().get("results") or [])

    def _parse_item(self, item) -> Optional[Article]:
        bibjson = item.get("bibjson") if isinstance(item, dict) else None
        if not isinstance(bibjson, dict):
            return None
        journal = bibjson.get("journal")
        codes = language_codes(journal.get("language")) if isinstance(journal, dict) else []
        return self._build_article(
            title=bibjson.get("title"),
            url=self.article_url(item, bibjson),
            snippet=bibjson.get("abstract") or "",
            language=codes[0] if len(codes) == 1 else None,
            is_portuguese=True if "pt" in codes else None,
            publication_date=self.publication_date(bibjson),
            has_full_text=True,
        )
