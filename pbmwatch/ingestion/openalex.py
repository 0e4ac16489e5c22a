"""OpenAlex works adapter."""

from typing import Dict, List, Optional

import httpx

from ..models import Article
from .base import SourceAdapter
from .normalize import host_label, is_http_url, to_int


def rebuild_abstract(inverted_index: Optional[Dict[str, List[int]]]) -> str:
    """Rebuild abstract text from OpenAlex's word -> positions index."""
    if not isinstance(inverted_index, dict):
        return ""
    positions = []
    for word, indexes in inverted_index.items():
        for index in indexes or []:
            if isinstance(index, int):
                positions.append((index, word))
    positions.sort()
    return " ".join(word for _, word in positions)


class OpenAlexAdapter(SourceAdapter):
    """Search scholarly works indexed by OpenAlex."""

    name = "openalex"
    label = ""
    default_url = "https://api.openalex.org/works"

    def __init__(self, contact_email: Optional[str] = None, **kwargs) -> None:
        """Initialize OpenAlex adapter."""
        super().__init__(**kwargs)
        self.contact_email = contact_email

    def build_params(self, query: str) -> dict:
        params = {"search": query, "per-page": self.max_results}
        if self.has_year_filter:
            start, end = self.year_bounds()
            params["filter"] = f"publication_year:{start}-{end}"
        if self.contact_email:
            # Identifies us for the OpenAlex "polite pool"
            params["mailto"] = self.contact_email
        return params

    @staticmethod
    def work_urls(work: dict) -> tuple:
        """Canonical URL (DOI first) and landing page of a work."""
        location = work.get("primary_location")
        landing = location.get("landing_page_url") if isinstance(location, dict) else None
        landing = landing if is_http_url(landing) else None
        for candidate in (work.get("doi"), landing, work.get("id")):
            if is_http_url(candidate):
                return candidate, landing
        return None, landing

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        response = await client.get(self.base_url, params=self.build_params(query))
        response.raise_for_status()
        return self._parse_items(response.json().get("results") or [])

    def _parse_item(self, work) -> Optional[Article]:
        if not isinstance(work, dict):
            return None
        url, landing = self.work_urls(work)
        year = work.get("publication_year")
        open_access = work.get("open_access")
        return self._build_article(
            title=work.get("display_name") or work.get("title"),
            url=url,
            source=host_label(landing or url),
            snippet=rebuild_abstract(work.get("abstract_inverted_index")),
            language=work.get("language"),
            publication_date=work.get("publication_date") or (str(year) if year else None),
            citation_count=to_int(work.get("cited_by_count")),
            has_full_text=open_access.get("is_oa") if isinstance(open_access, dict) else None,
            is_preprint=work.get("type") == "preprint",
        )
