"""Shared fixtures."""

import asyncio
import itertools
from pathlib import Path

import pendulum
import pytest

from pbmwatch.config import Config, ConfigModel, StorageConfig
from pbmwatch.ingestion import SourceAdapter
from pbmwatch.models import Article
from pbmwatch.storage import ArticleStore

FIXED_NOW = pendulum.datetime(2025, 6, 2, 12, 0, 0, tz="UTC")


class FakeClock:
    """Settable clock returning UTC-aware datetimes."""

    def __init__(self, now=FIXED_NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now.add(**kwargs)


class StubAdapter(SourceAdapter):
    """Adapter returning canned articles or raising a canned error."""

    def __init__(self, name, articles=None, error=None, delay=0.0, **kwargs):
        super().__init__(**kwargs)
        self.name = name
        self.articles = list(articles or [])
        self.error = error
        self.delay = delay
        self.queries = []

    async def _search(self, client, query):
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.articles)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_article(clock):
    """Factory for relevant, valid articles with unique URLs."""
    counter = itertools.count(1)

    def _make(title=None, url=None, source="pubmed.ncbi.nlm.nih.gov",
              snippet="Outcomes of patient blood management in surgery", now=None, **fields):
        n = next(counter)
        return Article.create(
            title=title or f"Bloodless surgery outcomes study {n}",
            url=url or f"https://pubmed.ncbi.nlm.nih.gov/{1000 + n}/",
            source=source,
            snippet=snippet,
            now=now or clock(),
            **fields,
        )

    return _make


@pytest.fixture
def data_dir(tmp_path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def store(data_dir, clock) -> ArticleStore:
    return ArticleStore(data_dir, clock=clock)


@pytest.fixture
def config(tmp_path, data_dir) -> Config:
    model = ConfigModel(
        search={"queries": ["bloodless surgery"]},
        storage=StorageConfig(data_dir=str(data_dir)),
    )
    return Config(config_path=tmp_path / "config.yaml", config=model)
