"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from pbmwatch.cli import app
from pbmwatch.cli import search as search_cli
from pbmwatch.config import load_config
from pbmwatch.models import utc_now
from pbmwatch.pipeline import SearchOrchestrator

from .conftest import StubAdapter

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    result = runner.invoke(app, [
        "--config", str(path),
        "init",
        "--data-dir", str(tmp_path / "data"),
        "--recipient", "team@hospital.org",
    ])
    assert result.exit_code == 0, result.output
    return path


@pytest.fixture
def stub_sources(monkeypatch, make_article):
    adapter = StubAdapter("pubmed", [make_article(title="Bloodless cardiac surgery outcomes", now=utc_now())])

    def factory(config):
        return SearchOrchestrator(config, adapters=[adapter])

    monkeypatch.setattr(search_cli, "SearchOrchestrator", factory)
    return adapter


def test_init_writes_config(config_path, tmp_path):
    config = load_config(config_path)

    assert config.storage.data_dir == str(tmp_path / "data")
    assert config.email.recipients == ["team@hospital.org"]
    assert (tmp_path / "data").is_dir()


def test_init_refuses_to_overwrite(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "init"])

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_status_before_any_search(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "status"])

    assert result.exit_code == 0, result.output
    assert "never" in result.output
    assert "team@hospital.org" in result.output


def test_search_then_status(config_path, stub_sources):
    result = runner.invoke(app, ["--config", str(config_path), "search"])
    assert result.exit_code == 0, result.output
    assert "Search completed" in result.output

    result = runner.invoke(app, ["--config", str(config_path), "status"])
    assert result.exit_code == 0, result.output
    assert "Stored articles: 1" in result.output


def test_cron_skips_when_not_due(config_path, stub_sources):
    runner.invoke(app, ["--config", str(config_path), "cron"])
    stub_sources.queries.clear()

    result = runner.invoke(app, ["--config", str(config_path), "cron", "--if-due"])

    assert result.exit_code == 0, result.output
    assert "not due" in result.output
    assert stub_sources.queries == []


def test_cron_send_email_without_key_prints_compose_link(config_path, stub_sources, monkeypatch):
    monkeypatch.delenv("BREVO_API_KEY", raising=False)

    result = runner.invoke(app, ["--config", str(config_path), "cron", "--send-email"])

    assert result.exit_code == 0, result.output
    assert "mailto:" in result.output


def test_email_with_no_articles_fails(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "email"])

    assert result.exit_code == 1
    assert "No articles to send" in result.output


def test_sources_list(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "sources", "list"])

    assert result.exit_code == 0, result.output
    assert "pubmed" in result.output
    assert "openalex" in result.output


def test_invalid_config_exits(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("filter: {trust_mode: maybe}", encoding="utf-8")

    result = runner.invoke(app, ["--config", str(path), "status"])

    assert result.exit_code == 1


def test_search_with_source_summary(config_path, stub_sources):
    result = runner.invoke(app, ["--config", str(config_path), "search", "--sources"])

    assert result.exit_code == 0, result.output
    assert "Source Summary" in result.output
