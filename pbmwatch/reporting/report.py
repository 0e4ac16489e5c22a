"""Plain-text article report."""

from datetime import datetime
from typing import List, Optional

import pendulum

from ..models import Article, utc_now

REPORT_TITLE = "Bloodless Medicine Monitor"


def report_subject(articles: List[Article]) -> str:
    """Subject line for a report email."""
    return f"Report - {REPORT_TITLE} ({len(articles)} articles)"


def format_report(articles: List[Article], generated_at: Optional[datetime] = None) -> str:
    """Format articles as a plain-text report."""
    generated_at = pendulum.instance(generated_at or utc_now())
    sources = {article.source for article in articles}
    lines = []

    # Header
    lines.append(REPORT_TITLE.upper())
    lines.append("Research Report")
    lines.append("=" * 37)
    lines.append("")
    lines.append(f"Generated on: {generated_at.format('DD/MM/YYYY')}")
    lines.append("")
    lines.append("Statistics:")
    lines.append(f"- Articles found: {len(articles)}")
    lines.append(f"- Sources searched: {len(sources)}")
    lines.append("")
    lines.append("ARTICLES:")
    lines.append("-" * 18)
    lines.append("")

    for i, article in enumerate(articles, 1):
        lines.append(f"{i}. {article.title}")
        lines.append(f"   Source: {article.source}")
        lines.append(f"   Link: {article.url}")
        if article.snippet:
            lines.append(f"   Summary: {article.snippet}")
        if article.publication_date:
            lines.append(f"   Published: {article.publication_date}")
        lines.append("")

    # Footer
    lines.append("---")
    lines.append(f"This report was generated automatically by the {REPORT_TITLE}.")
    lines.append("")

    return "\n".join(lines)
