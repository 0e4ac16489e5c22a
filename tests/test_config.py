"""Tests for configuration loading."""

import pytest
import yaml
from pydantic import ValidationError

from pbmwatch.config import (
    Config,
    ConfigModel,
    FilterPolicy,
    SearchConfig,
    default_config_path,
    load_config,
    save_config,
)
from pbmwatch.ingestion import ADAPTERS, build_adapters


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_defaults():
    config = ConfigModel()

    assert config.filter.trust_mode == "denylist"
    assert config.filter.min_title_length == 10
    assert config.storage.max_articles == 15
    assert config.storage.expiration_days == 30
    assert config.storage.search_interval_days == 7
    assert [s.name for s in config.sources][:2] == ["pubmed", "europepmc"]
    assert {s.name for s in config.sources} == set(ADAPTERS)
    assert any("sem" in q for q in config.search.queries)


def test_missing_file_uses_defaults(tmp_path):
    config = Config(tmp_path / "absent.yaml")
    assert config.config == ConfigModel()


def test_load_config(tmp_path):
    path = write_yaml(tmp_path / "config.yaml", {
        "search": {"queries": ["bloodless", "  "], "year_from": 2015},
        "sources": [{"name": "pubmed", "timeout": 5}, {"name": "plos", "enabled": False}],
        "filter": {"trust_mode": "allowlist", "trusted_domains": ["NIH.gov"]},
        "storage": {"data_dir": str(tmp_path / "data")},
    })

    config = load_config(path)

    assert config.search.queries == ["bloodless"]
    assert config.search.year_from == 2015
    assert [s.name for s in config.sources] == ["pubmed", "plos"]
    assert config.filter.trusted_domains == ["nih.gov"]


def test_empty_file_is_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ConfigModel()


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("search: [unbalanced", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config(path)


def test_invalid_values(tmp_path):
    path = write_yaml(tmp_path / "config.yaml", {"filter": {"trust_mode": "maybe"}})

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_duplicate_sources_rejected():
    with pytest.raises(ValidationError):
        ConfigModel(sources=[{"name": "pubmed"}, {"name": "pubmed"}])


def test_year_range_must_be_ordered():
    with pytest.raises(ValidationError):
        SearchConfig(year_from=2020, year_to=2010)


def test_queries_required():
    with pytest.raises(ValidationError):
        SearchConfig(queries=["", " "])


def test_filter_terms_normalized():
    policy = FilterPolicy(relevance_keywords=[" Bloodless ", "", "PBM"])
    assert policy.relevance_keywords == ["bloodless", "pbm"]


def test_save_and_reload(tmp_path):
    config = ConfigModel()
    config.email.recipients = ["team@hospital.org"]
    path = tmp_path / "nested" / "config.yaml"

    save_config(config, path)

    assert load_config(path) == config


def test_config_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("PBMWATCH_CONFIG", str(tmp_path / "custom.yaml"))
    assert default_config_path() == tmp_path / "custom.yaml"


def test_secrets_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("BREVO_API_KEY", "brevo-secret")
    monkeypatch.setenv("NCBI_KEY", "ncbi-secret")
    path = write_yaml(tmp_path / "config.yaml", {
        "sources": [{"name": "pubmed", "api_key_env": "NCBI_KEY"}],
    })
    config = Config(path)

    assert config.get_email_config()["api_key"] == "brevo-secret"
    assert config.get_api_key(config.get_source_config("pubmed")) == "ncbi-secret"
    assert config.get_source_config("plos") is None


def test_build_adapters_follows_config(tmp_path):
    path = write_yaml(tmp_path / "config.yaml", {
        "search": {"queries": ["x"], "year_from": 2018},
        "sources": [
            {"name": "openalex", "contact_email": "me@hospital.org", "max_results": 5},
            {"name": "medrxiv", "subjects": ["Surgery"]},
            {"name": "doaj", "enabled": False},
            {"name": "unknown-source"},
        ],
    })

    adapters = build_adapters(Config(path))

    assert [a.name for a in adapters] == ["openalex", "medrxiv"]
    assert adapters[0].contact_email == "me@hospital.org"
    assert adapters[0].max_results == 5
    assert adapters[0].year_from == 2018
    assert adapters[1].subjects == ["Surgery"]
