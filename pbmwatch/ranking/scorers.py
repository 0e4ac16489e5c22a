"""Keyword relevance scoring."""

from typing import Iterable, List

from ..models import Article


class KeywordScorer:
    """Score articles by the number of distinct relevance keywords they mention."""

    def __init__(self, keywords: Iterable[str]) -> None:
        """
        Initialize keyword scorer.

        Args:
            keywords: Relevance keywords; matching is case-insensitive
        """
        unique: List[str] = []
        for keyword in keywords:
            keyword = keyword.strip().lower()
            if keyword and keyword not in unique:
                unique.append(keyword)
        self.keywords = unique

    def matched_keywords(self, article: Article) -> List[str]:
        """Keywords found in the article's title or snippet."""
        text = article.text.lower()
        return [keyword for keyword in self.keywords if keyword in text]

    def score(self, article: Article) -> int:
        """Count of distinct keywords present in title + snippet."""
        return len(self.matched_keywords(article))

    def apply(self, article: Article) -> Article:
        """Copy of the article carrying its computed score."""
        return article.model_copy(update={"relevance_score": self.score(article)})
