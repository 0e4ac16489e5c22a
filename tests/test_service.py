"""Tests for the trigger, status and email entry points."""

import httpx

from pbmwatch.config import Config
from pbmwatch.pipeline import SearchOrchestrator
from pbmwatch.service import get_status, manual_search, scheduled_search, send_report

from .conftest import StubAdapter


def orchestrator_for(config, store, clock, adapter):
    return SearchOrchestrator(config, store=store, adapters=[adapter], clock=clock)


def test_manual_search(config, store, clock, make_article):
    adapter = StubAdapter("pubmed", [make_article()])

    outcome = manual_search(config, orchestrator=orchestrator_for(config, store, clock, adapter))

    assert outcome.success
    assert outcome.articles_found == 1
    assert "Found 1 articles" in outcome.message


def test_manual_search_reports_bad_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("storage: [unbalanced", encoding="utf-8")

    outcome = manual_search(Config(path))

    assert not outcome.success
    assert "Search setup failed" in outcome.message


def test_scheduled_search_skips_when_not_due(config, store, clock, make_article):
    adapter = StubAdapter("pubmed", [make_article()])
    orchestrator = orchestrator_for(config, store, clock, adapter)
    orchestrator.run()
    adapter.queries.clear()

    outcome = scheduled_search(config, only_if_due=True, orchestrator=orchestrator)

    assert outcome.success
    assert outcome.skipped
    assert outcome.articles_found == 1
    assert adapter.queries == []


def test_scheduled_search_runs_when_due(config, store, clock, make_article):
    adapter = StubAdapter("pubmed", [make_article()])
    orchestrator = orchestrator_for(config, store, clock, adapter)
    orchestrator.run()
    clock.advance(days=8)
    adapter.queries.clear()

    outcome = scheduled_search(config, only_if_due=True, orchestrator=orchestrator)

    assert outcome.success
    assert not outcome.skipped
    assert adapter.queries == ["bloodless surgery"]


def test_scheduled_search_without_due_check_always_runs(config, store, clock):
    adapter = StubAdapter("pubmed")
    orchestrator = orchestrator_for(config, store, clock, adapter)
    orchestrator.run()

    outcome = scheduled_search(config, orchestrator=orchestrator)

    assert not outcome.skipped
    assert len(adapter.queries) == 2


def test_get_status_does_not_search(config, store, clock, make_article):
    config.config.email.recipients = ["team@hospital.org"]
    store.merge_and_save([make_article(), make_article(now=clock().subtract(days=9))])

    status = get_status(config, store=store)

    assert status["articles_count"] == 2
    assert len(status["weekly_articles"]) == 1
    assert status["last_search"].articles_found == 2
    assert status["needs_new_search"] is False
    assert status["recipients"] == ["team@hospital.org"]


def test_send_report_uses_stored_articles(config, store, make_article, monkeypatch):
    monkeypatch.setenv("BREVO_API_KEY", "env-key")
    config.config.email.recipients = ["team@hospital.org"]
    store.merge_and_save([make_article(), make_article()])
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"messageId": "m1"})

    result = send_report(config, store=store, transport=httpx.MockTransport(handler))

    assert result.status == "sent"
    assert result.articles_count == 2
    assert seen[0].headers["api-key"] == "env-key"


def test_send_report_without_key_is_manual(config, make_article, monkeypatch):
    monkeypatch.delenv("BREVO_API_KEY", raising=False)
    config.config.email.recipients = ["team@hospital.org"]

    result = send_report(config, articles=[make_article()])

    assert result.status == "manual"
    assert result.mailto_link.startswith("mailto:team@hospital.org")
