"""BASE (Bielefeld Academic Search Engine) adapter."""

from typing import List, Optional

import httpx

from ..models import Article
from .base import SourceAdapter
from .normalize import first_str, host_label, is_http_url, language_codes


class BASEAdapter(SourceAdapter):
    """Search BASE through its HTTP search interface (JSON output)."""

    name = "base"
    label = ""
    default_url = "https://api.base-search.net/cgi-bin/BaseHttpSearchInterface.fcgi"

    def build_query(self, query: str) -> str:
        """Append the BASE year filter."""
        if not self.has_year_filter:
            return query
        start, end = self.year_bounds()
        return f"({query}) dcyear:[{start} TO {end}]"

    @staticmethod
    def document_url(doc: dict) -> Optional[str]:
        """Landing link of a BASE record, else its first http identifier."""
        link = first_str(doc.get("dclink"))
        if is_http_url(link):
            return link
        identifiers = doc.get("dcidentifier") or []
        if isinstance(identifiers, str):
            identifiers = [identifiers]
        for identifier in identifiers:
            if isinstance(identifier, str) and is_http_url(identifier):
                return identifier
        return None

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        response = await client.get(
            self.base_url,
            params={
                "func": "PerformSearch",
                "query": self.build_query(query),
                "format": "json",
                "hits": self.max_results,
            },
        )
        response.raise_for_status()
        return self._parse_items((response.json().get("response") or {}).get("docs") or [])

    def _parse_item(self, doc) -> Optional[Article]:
        if not isinstance(doc, dict):
            return None
        url = self.document_url(doc)
        languages = doc.get("dclang")
        codes = language_codes([languages] if isinstance(languages, str) else languages)
        year = first_str(doc.get("dcyear"))
        return self._build_article(
            title=doc.get("dctitle"),
            url=url,
            source=host_label(url),
            snippet=first_str(doc.get("dcdescription")) or "",
            language=codes[0] if len(codes) == 1 else None,
            is_portuguese=True if "pt" in codes else None,
            publication_date=first_str(doc.get("dcdate")) or year,
            has_full_text=str(doc.get("dcoa")) == "1",
        )
