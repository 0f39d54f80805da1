"""Tests for price_crawler/common/config_loader.py"""

import pytest

from price_crawler.common.config_loader import (
    CrawlerSettings,
    build_crawler_settings,
    load_config,
    load_crawler_settings,
    load_retailer_rules,
)
from price_crawler.common.constants import DEFAULT_USER_AGENT


class TestBuildCrawlerSettings:
    def test_empty_config_uses_defaults(self):
        settings = build_crawler_settings({})
        assert settings == CrawlerSettings()
        assert settings.user_agent == DEFAULT_USER_AGENT
        assert settings.excluded_extensions == (".pdf",)

    def test_reads_sections(self):
        settings = build_crawler_settings({
            "http": {"user_agent": "test-agent", "timeout": 5, "max_in_flight": 2},
            "concurrency": {"cell_workers": 8, "page_workers": 1},
            "search": {"result_class": "g", "snippet_index": 0},
            "discovery": {"excluded_extensions": [".PDF", ".doc"]},
            "output": {"suffix": "-prices"},
        })
        assert settings.user_agent == "test-agent"
        assert settings.timeout == 5.0
        assert settings.max_in_flight == 2
        assert settings.cell_workers == 8
        assert settings.page_workers == 1
        assert settings.search.result_class == "g"
        assert settings.search.snippet_index == 0
        assert settings.search.title_tag == "h3"
        assert settings.excluded_extensions == (".pdf", ".doc")
        assert settings.output_suffix == "-prices"

    def test_null_sections_tolerated(self):
        settings = build_crawler_settings({"http": None, "search": None})
        assert settings.search.url == "https://www.google.com/search"


class TestEnvironmentOverrides:
    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("PRICE_CRAWLER_USER_AGENT", "env-agent")
        monkeypatch.setenv("PRICE_CRAWLER_CELL_WORKERS", "7")
        settings = load_crawler_settings()
        assert settings.user_agent == "env-agent"
        assert settings.cell_workers == 7

    def test_invalid_int_ignored(self, monkeypatch):
        monkeypatch.setenv("PRICE_CRAWLER_PAGE_WORKERS", "many")
        monkeypatch.delenv("PRICE_CRAWLER_CELL_WORKERS", raising=False)
        settings = load_crawler_settings()
        assert settings.page_workers == 3

    def test_explicit_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_crawler_settings(str(tmp_path / "missing.yaml"))


class TestLoadFromConfigFiles:
    """Tests that load real config YAML files from the repo."""

    def test_load_crawler_yaml(self):
        config = load_config("crawler.yaml")
        assert "search" in config
        assert "http" in config

    def test_retailer_rules_have_selectors(self):
        rules = load_retailer_rules()
        assert "argos.co.uk" in rules
        assert rules["argos.co.uk"]["attribute"] == "content"
        for domain, rule in rules.items():
            assert rule.get("selector"), f"{domain} has no selector"

    def test_load_config_accepts_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("retailers:\n  example.com:\n    selector: '.price'\n", encoding="utf-8")
        assert load_retailer_rules(str(path)) == {"example.com": {"selector": ".price"}}

    def test_missing_config_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does-not-exist.yaml")
