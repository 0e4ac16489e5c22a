"""PLOS search API adapter."""

from typing import List, Optional

import httpx

from ..models import Article
from .base import SourceAdapter
from .normalize import first_str

ARTICLE_URL = "https://journals.plos.org/plosone/article?id={doi}"


class PLOSAdapter(SourceAdapter):
    """Search PLOS journals (Solr API)."""

    name = "plos"
    label = "plos.org"
    default_url = "https://api.plos.org/search"

    def build_params(self, query: str) -> dict:
        filters = ["doc_type:full"]
        if self.has_year_filter:
            start, end = self.year_bounds()
            filters.append(
                f"publication_date:[{start}-01-01T00:00:00Z TO {end}-12-31T23:59:59Z]"
            )
        return {
            "q": query,
            "rows": self.max_results,
            "fl": "id,title_display,title,abstract,journal,publication_date,counter_total_all",
            "fq": " AND ".join(filters),
            "wt": "json",
        }

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        response = await client.get(self.base_url, params=self.build_params(query))
        response.raise_for_status()
        return self._parse_items((response.json().get("response") or {}).get("docs") or [])

    def _parse_item(self, doc) -> Optional[Article]:
        if not isinstance(doc, dict):
            return None
        doi = doc.get("id")
        published = first_str(doc.get("publication_date"))
        return self._build_article(
            title=doc.get("title_display") or doc.get("title"),
            url=ARTICLE_URL.format(doi=doi) if doi else None,
            snippet=first_str(doc.get("abstract")) or "",
            publication_date=published[:10] if published else None,
            has_full_text=True,
        )
