"""Tests for configuration loading."""

import os
import tempfile

import pytest
import yaml

from job_aggregator.config import AppConfig, DEFAULT_TIMEOUTS, load_config, validate_config


@pytest.fixture
def config_file():
    """Create a temporary config file."""
    config_data = {
        "api_keys": {
            "openai_api_key": "sk-test",
            "apify_api_token": "apify-test",
        },
        "llm": {"model": "gpt-4o", "query_temperature": 0.5},
        "search": {
            "linkedin_queries": 2,
            "timeouts": {"behance": 30},
            "upwork_keyword_inferences": [
                {"when": ["Kafka"], "add": ["Streaming"]},
                {"when": [], "add": ["Ignored"]},
            ],
        },
        "log_level": "DEBUG",
    }

    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(config_data, f)
        path = f.name

    yield path
    os.unlink(path)


class TestLoadConfig:
    def test_loads_valid_config(self, config_file):
        config = load_config(config_file)
        assert config.api_keys.openai_api_key == "sk-test"
        assert config.api_keys.apify_api_token == "apify-test"
        assert config.llm.model == "gpt-4o"
        assert config.llm.query_temperature == 0.5
        assert config.search.linkedin_queries == 2
        assert config.log_level == "DEBUG"

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_none_path_uses_defaults(self):
        config = load_config(None)
        assert config.llm.model == "gpt-4o-mini"
        assert config.llm.selector_temperature == 0.3
        assert config.llm.cv_temperature == 0.1
        assert config.search.timeouts == DEFAULT_TIMEOUTS

    def test_partial_timeouts_merge_with_defaults(self, config_file):
        config = load_config(config_file)
        assert config.search.timeout_for("behance") == 30
        assert config.search.timeout_for("linkedin") == 120

    def test_keyword_inferences_lowercased_and_filtered(self, config_file):
        config = load_config(config_file)
        rules = config.search.upwork_keyword_inferences
        assert len(rules) == 1
        assert rules[0].when == ["kafka"]
        assert rules[0].add == ["Streaming"]

    def test_env_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
        monkeypatch.setenv("ENRICHLAYER_API_KEY", "enrich-env")
        config = load_config(config_file)
        assert config.api_keys.openai_api_key == "sk-from-env"
        assert config.api_keys.enrichlayer_api_key == "enrich-env"
        assert config.api_keys.apify_api_token == "apify-test"


class TestValidateConfig:
    def test_missing_keys_warn(self):
        warnings = validate_config(AppConfig())
        assert any("openai" in w.lower() for w in warnings)
        assert any("apify" in w.lower() for w in warnings)
        assert any("enrichlayer" in w.lower() for w in warnings)

    def test_bad_search_settings_warn(self):
        config = AppConfig()
        config.search.linkedin_queries = 0
        config.search.timeouts["indeed"] = 0
        warnings = validate_config(config)
        assert any("linkedin_queries" in w for w in warnings)
        assert any("indeed" in w for w in warnings)

    def test_valid_config_no_key_warnings(self, config_file):
        warnings = validate_config(load_config(config_file))
        assert not any("openai" in w.lower() for w in warnings)
        assert not any("apify" in w.lower() for w in warnings)
