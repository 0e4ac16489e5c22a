"""Trust and relevance filtering."""

import logging
from typing import Iterable, List, Optional

from ..config import FilterPolicy
from ..ingestion.normalize import host_label
from ..models import Article

logger = logging.getLogger(__name__)


def host_matches(host: str, domains: Iterable[str]) -> bool:
    """Host equals a domain or is one of its subdomains."""
    host = host.lower()
    return any(host == domain or host.endswith("." + domain) for domain in domains)


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any keyword."""
    text = text.lower()
    return any(keyword in text for keyword in keywords)


class ArticleFilter:
    """Accept or reject articles according to a FilterPolicy.

    Checks run in order: validity (http(s) URL, title length), domain trust
    (allow-list or deny-list depending on ``policy.trust_mode``), then topical
    relevance when ``policy.require_keyword_match`` is set.
    """

    def __init__(self, policy: Optional[FilterPolicy] = None) -> None:
        """Initialize article filter."""
        self.policy = policy or FilterPolicy()

    def reject_reason(self, article: Article) -> Optional[str]:
        """First failed check for an article, or None when it is accepted."""
        policy = self.policy

        if not article.url.lower().startswith(("http://", "https://")):
            return "invalid URL scheme"
        if len(article.title.strip()) <= policy.min_title_length:
            return "title too short"

        host = host_label(article.url)
        if policy.trust_mode == "allowlist":
            if not host_matches(host, policy.trusted_domains):
                return f"untrusted domain {host}"
        elif host_matches(host, policy.denied_domains):
            return f"denied domain {host}"

        if policy.require_keyword_match and not contains_keyword(
            article.text, policy.relevance_keywords
        ):
            return "no relevance keyword"

        return None

    def accept(self, article: Article) -> bool:
        """Whether the article passes every check."""
        return self.reject_reason(article) is None

    def filter(self, articles: Iterable[Article]) -> List[Article]:
        """Keep accepted articles in their original order."""
        accepted = []
        for article in articles:
            reason = self.reject_reason(article)
            if reason is None:
                accepted.append(article)
            else:
                logger.debug("Rejected %s: %s", article.url, reason)
        return accepted
