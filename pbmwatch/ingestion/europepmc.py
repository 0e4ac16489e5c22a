"""Europe PMC adapter."""

from typing import List, Optional

import httpx

from ..models import Article
from .base import SourceAdapter
from .normalize import to_int


class EuropePMCAdapter(SourceAdapter):
    """Search the Europe PMC REST API (core result type, includes abstracts)."""

    name = "europepmc"
    label = "europepmc.org"
    default_url = "https://www.ebi.ac.uk/europepmc/webservices/rest/search"
    markup = True

    def build_query(self, query: str) -> str:
        """Append the Europe PMC publication-year filter."""
        if not self.has_year_filter:
            return query
        start, end = self.year_bounds()
        return f"({query}) AND (PUB_YEAR:[{start} TO {end}])"

    @staticmethod
    def article_url(item: dict) -> Optional[str]:
        """Europe PMC landing page for a result."""
        if item.get("pmcid"):
            return f"https://europepmc.org/article/PMC/{item['pmcid']}"
        if item.get("pmid"):
            return f"https://europepmc.org/article/MED/{item['pmid']}"
        if item.get("source") and item.get("id"):
            return f"https://europepmc.org/article/{item['source']}/{item['id']}"
        return None

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        response = await client.get(
            self.base_url,
            params={
                "query": self.build_query(query),
                "format": "json",
                "pageSize": self.max_results,
                "resultType": "core",
            },
        )
        response.raise_for_status()
        return self._parse_items((response.json().get("resultList") or {}).get("result") or [])

    def _parse_item(self, item) -> Optional[Article]:
        if not isinstance(item, dict):
            return None
        is_open = item.get("isOpenAccess") == "Y" or item.get("inEPMC") == "Y"
        return self._build_article(
            title=item.get("title"),
            url=self.article_url(item),
            snippet=item.get("abstractText") or "",
            language=item.get("language"),
            publication_date=item.get("firstPublicationDate") or item.get("pubYear"),
            citation_count=to_int(item.get("citedByCount")),
            has_full_text=is_open,
            is_preprint=item.get("source") == "PPR",
        )
