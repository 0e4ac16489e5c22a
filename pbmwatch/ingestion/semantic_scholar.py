"""Semantic Scholar Graph API adapter."""

from typing import List, Optional

import httpx

from ..models import Article
from .base import SourceAdapter
from .normalize import to_int

FIELDS = "title,url,abstract,year,publicationDate,citationCount,isOpenAccess,publicationTypes"


class SemanticScholarAdapter(SourceAdapter):
    """Search papers through the Semantic Scholar Graph API."""

    name = "semantic_scholar"
    label = "semanticscholar.org"
    default_url = "https://api.semanticscholar.org/graph/v1/paper/search"

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        params = {"query": query, "limit": self.max_results, "fields": FIELDS}
        if self.has_year_filter:
            start, end = self.year_bounds()
            params["year"] = f"{start}-{end}"

        headers = {"x-api-key": self.api_key} if self.api_key else None
        response = await client.get(self.base_url, params=params, headers=headers)
        response.raise_for_status()
        return self._parse_items(response.json().get("data") or [])

    def _parse_item(self, paper) -> Optional[Article]:
        if not isinstance(paper, dict):
            return None
        url = paper.get("url")
        if not url and paper.get("paperId"):
            url = f"https://www.semanticscholar.org/paper/{paper['paperId']}"
        year = paper.get("year")
        types = paper.get("publicationTypes") or []
        return self._build_article(
            title=paper.get("title"),
            url=url,
            snippet=paper.get("abstract") or "",
            publication_date=paper.get("publicationDate") or (str(year) if year else None),
            citation_count=to_int(paper.get("citationCount")),
            has_full_text=paper.get("isOpenAccess"),
            is_preprint="Preprint" in types if types else None,
        )
