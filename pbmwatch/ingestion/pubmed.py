"""PubMed adapter using the NCBI E-utilities (esearch then efetch)."""

import xml.etree.ElementTree as ET
from typing import List, Optional

import httpx

from ..models import Article
from .base import SourceAdapter

EFETCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"

_MONTHS = {
    "jan": "01", "feb": "02", "mar": "03", "apr": "04", "may": "05", "jun": "06",
    "jul": "07", "aug": "08", "sep": "09", "oct": "10", "nov": "11", "dec": "12",
}


def _node_text(node: Optional[ET.Element]) -> str:
    """Text of an element including inline markup children (<i>, <sup>)."""
    if node is None:
        return ""
    return "".join(node.itertext()).strip()


def _pub_date(node: Optional[ET.Element]) -> Optional[str]:
    """Format a PubDate element as YYYY, YYYY-MM or YYYY-MM-DD."""
    if node is None:
        return None
    year = node.findtext("Year")
    if not year:
        # Ranges such as "2023 Nov-Dec" only carry a MedlineDate
        return node.findtext("MedlineDate") or None
    month = (node.findtext("Month") or "").strip()
    month = _MONTHS.get(month[:3].lower(), month if month.isdigit() else "")
    if not month:
        return year
    day = (node.findtext("Day") or "").strip()
    if day.isdigit():
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return f"{year}-{month.zfill(2)}"


class PubMedAdapter(SourceAdapter):
    """Search PubMed and fetch article details as XML."""

    name = "pubmed"
    label = "pubmed.ncbi.nlm.nih.gov"
    default_url = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esearch.fcgi"

    def build_term(self, query: str) -> str:
        """Append the PubMed publication-date filter."""
        if not self.has_year_filter:
            return query
        start, end = self.year_bounds()
        return f"({query}) AND {start}:{end}[dp]"

    async def _search(self, client: httpx.AsyncClient, query: str) -> List[Optional[Article]]:
        params = {
            "db": "pubmed",
            "term": self.build_term(query),
            "retmax": self.max_results,
            "retmode": "json",
            "sort": "relevance",
        }
        if self.api_key:
            params["api_key"] = self.api_key

        response = await client.get(self.base_url, params=params)
        response.raise_for_status()
        ids = (response.json().get("esearchresult") or {}).get("idlist") or []
        if not ids:
            return []

        fetch_params = {"db": "pubmed", "id": ",".join(ids), "retmode": "xml"}
        if self.api_key:
            fetch_params["api_key"] = self.api_key

        response = await client.get(EFETCH_URL, params=fetch_params)
        response.raise_for_status()
        return self.parse_efetch(response.text)

    def parse_efetch(self, xml_text: str) -> List[Optional[Article]]:
        """Parse an efetch PubmedArticleSet document."""
        root = ET.fromstring(xml_text)
        return self._parse_items(list(root.iter("PubmedArticle")))

    def _parse_item(self, node: ET.Element) -> Optional[Article]:
        pmid = _node_text(node.find("MedlineCitation/PMID"))
        article = node.find("MedlineCitation/Article")
        if article is None or not pmid:
            return None

        abstract = " ".join(
            text for text in (_node_text(p) for p in article.findall("Abstract/AbstractText")) if text
        )
        pmc_ids = [
            aid.text for aid in node.findall("PubmedData/ArticleIdList/ArticleId")
            if aid.get("IdType") == "pmc" and aid.text
        ]

        return self._build_article(
            title=_node_text(article.find("ArticleTitle")),
            url=f"https://pubmed.ncbi.nlm.nih.gov/{pmid}/",
            snippet=abstract,
            language=article.findtext("Language"),
            publication_date=_pub_date(article.find("Journal/JournalIssue/PubDate")),
            has_full_text=bool(pmc_ids),
        )
