"""Article ranking with a tiered comparator."""

from functools import cmp_to_key
from typing import Iterable, List, Optional

from ..config import RankingConfig
from ..ingestion.normalize import extract_year
from ..models import Article
from .scorers import KeywordScorer


def _desc(a, b) -> int:
    """Compare for descending order."""
    return (a < b) - (a > b)


class ArticleRanker:
    """Score and order articles.

    Tiers, each only breaking ties of the previous one:

    1. relevance score, descending (when enabled)
    2. Portuguese articles first
    3. citation count, descending, only when both articles have one
    4. publication year, descending; unknown years count as 0
    """

    def __init__(
        self,
        scorer: KeywordScorer,
        config: Optional[RankingConfig] = None,
    ) -> None:
        """Initialize article ranker."""
        self.scorer = scorer
        self.config = config or RankingConfig()

    def compare(self, a: Article, b: Article) -> int:
        """Negative when ``a`` ranks before ``b``, positive after, 0 for a tie."""
        if self.config.use_relevance_score:
            result = _desc(a.relevance_score, b.relevance_score)
            if result:
                return result

        if a.is_portuguese != b.is_portuguese:
            return -1 if a.is_portuguese else 1

        if a.citation_count is not None and b.citation_count is not None:
            result = _desc(a.citation_count, b.citation_count)
            if result:
                return result

        return _desc(extract_year(a.publication_date), extract_year(b.publication_date))

    def sort(self, articles: Iterable[Article]) -> List[Article]:
        """Stable sort using the tiered comparator."""
        return sorted(articles, key=cmp_to_key(self.compare))

    def rank(self, articles: Iterable[Article]) -> List[Article]:
        """Attach relevance scores, then sort."""
        scored = [self.scorer.apply(article) for article in articles]
        return self.sort(scored)
