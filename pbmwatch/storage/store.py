"""Lifecycle store: a capped, expiring article collection persisted as JSON."""

import json
import logging
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..models import Article, LastSearchRecord, ensure_utc, utc_now
from ..ranking.dedup import canonical_url_key, deduplicate

logger = logging.getLogger(__name__)

ARTICLES_FILE = "articles.json"
LAST_SEARCH_FILE = "last-search.json"


class ArticleStore:
    """Own the persisted article collection and the last-search record.

    The in-memory copy is a cache of the two JSON files. Disk errors are
    logged and swallowed; when a write fails the cache stays authoritative
    until the next successful write resynchronizes the files.
    """

    def __init__(
        self,
        data_dir: Path,
        max_articles: int = 15,
        expiration_days: int = 30,
        search_interval_days: int = 7,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize article store.

        Args:
            data_dir: Directory holding articles.json and last-search.json
            max_articles: Cap on the persisted collection
            expiration_days: Retention window applied to merged articles
            search_interval_days: Days until the next scheduled search is due
            clock: Source of "now" (UTC-aware)
        """
        self.data_dir = Path(data_dir)
        self.max_articles = max_articles
        self.expiration_days = expiration_days
        self.search_interval_days = search_interval_days
        self.clock = clock
        self._lock = threading.RLock()
        self._articles: Optional[List[Article]] = None
        self._last_search: Optional[LastSearchRecord] = None

    @property
    def articles_path(self) -> Path:
        return self.data_dir / ARTICLES_FILE

    @property
    def last_search_path(self) -> Path:
        return self.data_dir / LAST_SEARCH_FILE

    def _read_json(self, path: Path) -> Optional[Any]:
        """Read a JSON file, returning None when missing or unreadable."""
        try:
            if not path.exists():
                return None
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error reading %s: %s", path, e)
            return None

    def _write_json(self, path: Path, data: Any) -> bool:
        """Write a JSON file, returning False on failure."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_name(path.name + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error writing %s: %s", path, e)
            return False

    def _parse_records(self, records: Sequence[Any]) -> List[Article]:
        """Validate persisted records, dropping legacy and malformed entries."""
        articles = []
        for record in records:
            if not isinstance(record, dict) or not record.get("expiresAt"):
                # Records without an expiration predate the retention policy
                continue
            try:
                articles.append(Article.model_validate(record))
            except ValidationError as e:
                logger.warning("Dropping invalid stored article %r: %s", record.get("url"), e)
        return articles

    def _valid(self, articles: Sequence[Article]) -> List[Article]:
        """Non-expired, unique-by-URL articles, capped."""
        now = self.clock()
        fresh = [a for a in articles if not a.is_expired(now)]
        return deduplicate(fresh)[: self.max_articles]

    def _persist_articles(self, articles: List[Article]) -> None:
        self._articles = list(articles)
        self._write_json(
            self.articles_path,
            {
                "articles": [a.to_record() for a in articles],
                "lastUpdated": ensure_utc(self.clock()).isoformat(),
            },
        )

    def _load_cache(self) -> List[Article]:
        """Populate the cache from disk on first use."""
        if self._articles is None:
            data = self._read_json(self.articles_path)
            records = data.get("articles", []) if isinstance(data, dict) else []
            if not isinstance(records, list):
                records = []
            parsed = self._parse_records(records)
            valid = self._valid(parsed)
            self._articles = valid
            if len(valid) != len(records):
                logger.info("Cleaned %d expired/legacy articles", len(records) - len(valid))
                self._persist_articles(valid)
        return self._articles

    def load_all(self) -> List[Article]:
        """
        Currently valid articles, newest first, capped at max_articles.

        Expired entries found in the cache or on disk are purged and the
        cleaned set is written back.
        """
        with self._lock:
            cached = self._load_cache()
            valid = self._valid(cached)
            if len(valid) != len(cached):
                logger.info("Cleaned %d expired articles", len(cached) - len(valid))
                self._persist_articles(valid)
            return list(valid)

    def merge_and_save(self, new_articles: Sequence[Article]) -> List[Article]:
        """
        Merge a run's articles into the collection and record the run.

        New articles whose URL is already stored are dropped; the rest are
        placed ahead of existing ones and the result is truncated to the cap.

        Returns:
            The persisted collection after the merge
        """
        with self._lock:
            now = self.clock()
            existing = self._valid(self._load_cache())
            existing_keys = {canonical_url_key(a.url) for a in existing}

            incoming = [
                self._restamp(article, now)
                for article in deduplicate(new_articles)
                if canonical_url_key(article.url) not in existing_keys
            ]
            incoming = [a for a in incoming if not a.is_expired(now)]
            merged = (incoming + existing)[: self.max_articles]

            sources = []
            for article in new_articles:
                if article.source not in sources:
                    sources.append(article.source)

            self._save_last_search(LastSearchRecord(
                last_search_timestamp=now,
                next_scheduled_search=now + timedelta(days=self.search_interval_days),
                articles_found=len(new_articles),
                sources_searched=sources,
            ))
            self._persist_articles(merged)

            logger.info(
                "Stored %d new articles (%d total, cap %d)",
                len(incoming),
                len(merged),
                self.max_articles,
            )
            return list(merged)

    def _restamp(self, article: Article, now: datetime) -> Article:
        """Ensure the article's expiration follows the store's retention window."""
        expected = article.date_found + timedelta(days=self.expiration_days)
        if article.expires_at == expected:
            return article
        return article.model_copy(update={"expires_at": expected})

    def read_last_search(self) -> LastSearchRecord:
        """The last-search record, or an empty one if no search has completed."""
        with self._lock:
            if self._last_search is None:
                data = self._read_json(self.last_search_path)
                record = LastSearchRecord()
                if isinstance(data, dict):
                    try:
                        record = LastSearchRecord.model_validate(data)
                    except ValidationError as e:
                        logger.warning("Ignoring invalid last-search record: %s", e)
                self._last_search = record
            return self._last_search

    def _save_last_search(self, record: LastSearchRecord) -> None:
        self._last_search = record
        self._write_json(self.last_search_path, record.to_record())

    def needs_new_search(self) -> bool:
        """True when no search has run or the last one is older than the interval."""
        last = self.read_last_search()
        if last.last_search_timestamp is None:
            return True
        cutoff = self.clock() - timedelta(days=self.search_interval_days)
        return ensure_utc(last.last_search_timestamp) < cutoff

    def recent_articles(self, days: int = 7) -> List[Article]:
        """Valid articles found within the last ``days`` days."""
        cutoff = self.clock() - timedelta(days=days)
        return [a for a in self.load_all() if a.date_found >= cutoff]

    def status(self) -> Dict[str, Any]:
        """Summary used by the status query."""
        articles = self.load_all()
        return {
            "last_search": self.read_last_search(),
            "articles_count": len(articles),
            "articles": articles,
        }

    def clear(self) -> None:
        """Drop all articles and the last-search record."""
        with self._lock:
            self._persist_articles([])
            self._save_last_search(LastSearchRecord())
