"""Tests for the lifecycle store."""

import json
import threading
from datetime import timedelta

from pbmwatch.storage import ARTICLES_FILE, LAST_SEARCH_FILE, ArticleStore

from .conftest import FIXED_NOW


def read_json(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def test_empty_store(store):
    assert store.load_all() == []
    assert store.needs_new_search()
    assert store.read_last_search().last_search_timestamp is None


def test_merge_persists_camel_case_files(store, data_dir, make_article):
    article = make_article(publication_date="2024")
    store.merge_and_save([article])

    data = read_json(data_dir / ARTICLES_FILE)
    assert "lastUpdated" in data
    assert data["articles"][0]["url"] == article.url
    assert "expiresAt" in data["articles"][0]

    last = read_json(data_dir / LAST_SEARCH_FILE)
    assert last["articlesFound"] == 1
    assert last["sourcesSearched"] == ["pubmed.ncbi.nlm.nih.gov"]


def test_articles_survive_restart(store, data_dir, clock, make_article):
    articles = [make_article() for _ in range(3)]
    store.merge_and_save(articles)

    reopened = ArticleStore(data_dir, clock=clock)
    assert [a.url for a in reopened.load_all()] == [a.url for a in articles]
    assert not reopened.needs_new_search()


def test_cap_is_enforced(store, make_article):
    store.merge_and_save([make_article() for _ in range(20)])
    assert len(store.load_all()) == 15

    store.merge_and_save([make_article() for _ in range(4)])
    assert len(store.load_all()) == 15


def test_new_articles_go_first_and_duplicates_are_dropped(store, make_article):
    existing = [make_article() for _ in range(15)]
    store.merge_and_save(existing)

    new = [make_article() for _ in range(3)]
    duplicate = make_article(url=existing[0].url)
    result = store.merge_and_save(new + [duplicate])

    urls = [a.url for a in result]
    assert len(result) == 15
    assert urls[:3] == [a.url for a in new]
    assert urls.count(existing[0].url) == 1
    # The three oldest existing entries fall off the end
    assert urls[3:] == [a.url for a in existing[:12]]
    assert store.read_last_search().articles_found == 4


def test_last_search_record_times(store, clock, make_article):
    store.merge_and_save([make_article()])
    record = store.read_last_search()

    assert record.last_search_timestamp == clock()
    assert record.next_scheduled_search == clock() + timedelta(days=7)


def test_expired_articles_never_returned(store, data_dir, clock, make_article):
    store.merge_and_save([make_article() for _ in range(2)])
    clock.advance(days=30)

    assert store.load_all() == []
    assert read_json(data_dir / ARTICLES_FILE)["articles"] == []


def test_expired_records_on_disk_are_purged(data_dir, clock, make_article):
    fresh = make_article()
    stale = make_article(now=FIXED_NOW.subtract(days=40))
    data_dir.mkdir(parents=True)
    with open(data_dir / ARTICLES_FILE, "w", encoding="utf-8") as f:
        json.dump({"articles": [stale.to_record(), fresh.to_record()]}, f)

    store = ArticleStore(data_dir, clock=clock)

    assert [a.url for a in store.load_all()] == [fresh.url]
    assert len(read_json(data_dir / ARTICLES_FILE)["articles"]) == 1


def test_legacy_and_invalid_records_are_dropped(data_dir, clock, make_article):
    fresh = make_article()
    legacy = fresh.to_record()
    legacy.pop("expiresAt")
    legacy["url"] = "https://legacy.org/1"
    broken = dict(fresh.to_record(), url="not a url")
    data_dir.mkdir(parents=True)
    with open(data_dir / ARTICLES_FILE, "w", encoding="utf-8") as f:
        json.dump({"articles": [legacy, broken, fresh.to_record()]}, f)

    store = ArticleStore(data_dir, clock=clock)

    assert [a.url for a in store.load_all()] == [fresh.url]
    persisted = read_json(data_dir / ARTICLES_FILE)["articles"]
    assert [r["url"] for r in persisted] == [fresh.url]


def test_corrupt_file_is_treated_as_empty(data_dir, clock):
    data_dir.mkdir(parents=True)
    (data_dir / ARTICLES_FILE).write_text("{not json", encoding="utf-8")
    (data_dir / LAST_SEARCH_FILE).write_text("[]", encoding="utf-8")

    store = ArticleStore(data_dir, clock=clock)

    assert store.load_all() == []
    assert store.needs_new_search()


def test_needs_new_search_after_interval(store, clock, make_article):
    store.merge_and_save([make_article()])
    assert not store.needs_new_search()

    clock.advance(days=7)
    assert not store.needs_new_search()

    clock.advance(seconds=1)
    assert store.needs_new_search()


def test_empty_merge_still_records_search(store):
    assert store.merge_and_save([]) == []
    assert not store.needs_new_search()
    assert store.read_last_search().articles_found == 0


def test_incoming_articles_are_restamped(data_dir, clock, make_article):
    store = ArticleStore(data_dir, expiration_days=10, clock=clock)
    article = make_article()

    stored = store.merge_and_save([article])[0]

    assert stored.expires_at == article.date_found + timedelta(days=10)


def test_write_failure_keeps_memory_view(tmp_path, clock, make_article):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = ArticleStore(blocker / "data", clock=clock)

    articles = [make_article() for _ in range(2)]
    result = store.merge_and_save(articles)

    assert [a.url for a in result] == [a.url for a in articles]
    assert [a.url for a in store.load_all()] == [a.url for a in articles]
    assert not store.needs_new_search()


def test_recent_articles(store, clock, make_article):
    old = make_article(now=clock().subtract(days=10))
    recent = make_article()
    store.merge_and_save([recent, old])

    assert [a.url for a in store.recent_articles(days=7)] == [recent.url]
    assert len(store.load_all()) == 2


def test_status(store, make_article):
    store.merge_and_save([make_article()])
    status = store.status()

    assert status["articles_count"] == 1
    assert status["last_search"].articles_found == 1
    assert len(status["articles"]) == 1


def test_clear(store, make_article):
    store.merge_and_save([make_article()])
    store.clear()

    assert store.load_all() == []
    assert store.needs_new_search()


def merge_concurrently(store, batches):
    barrier = threading.Barrier(len(batches))
    errors = []

    def worker(batch):
        try:
            barrier.wait()
            store.merge_and_save(batch)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(batch,)) for batch in batches]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []


def test_concurrent_merges_lose_no_updates(store, data_dir, make_article):
    batches = [[make_article() for _ in range(3)] for _ in range(5)]

    merge_concurrently(store, batches)

    expected = {a.url for batch in batches for a in batch}
    stored = [a.url for a in store.load_all()]
    assert len(stored) == 15
    assert set(stored) == expected
    assert {a["url"] for a in read_json(data_dir / ARTICLES_FILE)["articles"]} == expected


def test_concurrent_merges_respect_cap(store, make_article):
    shared = make_article()
    batches = [[shared] + [make_article() for _ in range(4)] for _ in range(6)]

    merge_concurrently(store, batches)

    stored = [a.url for a in store.load_all()]
    assert len(stored) == 15
    assert len(set(stored)) == 15
