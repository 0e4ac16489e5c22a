"""Cross-source deduplication by canonical URL."""

from typing import Iterable, List
from urllib.parse import urlsplit, urlunsplit

from ..models import Article


def canonical_url_key(url: str) -> str:
    """
    Comparison key for a URL.

    Scheme and host are lower-cased, the fragment is dropped and a trailing
    slash on the path is removed. Path and query keep their case.
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return url.strip()
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def deduplicate(articles: Iterable[Article]) -> List[Article]:
    """Keep the first article seen for each canonical URL."""
    seen = set()
    unique = []
    for article in articles:
        key = canonical_url_key(article.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique
