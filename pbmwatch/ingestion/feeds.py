"""RSS helpers shared by feed-based adapters (medRxiv, SciELO)."""

import time
from typing import List, Optional

import feedparser
import pendulum


def parse_feed(text: str) -> List[feedparser.FeedParserDict]:
    """Parse an RSS/Atom document into its entries."""
    feed = feedparser.parse(text)
    if feed.bozo and not feed.entries:
        raise ValueError(f"Invalid RSS feed: {feed.bozo_exception}")
    return list(feed.entries)


def entry_date(entry: feedparser.FeedParserDict) -> Optional[str]:
    """Publication date of a feed entry as YYYY-MM-DD."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            return time.strftime("%Y-%m-%d", parsed)

    for key in ("dc_date", "published", "updated", "date"):
        raw = entry.get(key)
        if not raw:
            continue
        try:
            return pendulum.parse(raw, strict=False).to_date_string()
        except (ValueError, TypeError, AttributeError):
            return raw
    return None


def entry_summary(entry: feedparser.FeedParserDict) -> str:
    """Summary text of a feed entry."""
    return entry.get("summary") or entry.get("description") or ""


def entry_language(entry: feedparser.FeedParserDict) -> Optional[str]:
    """Language declared on an entry (``dc:language``)."""
    return entry.get("dc_language") or entry.get("language")
