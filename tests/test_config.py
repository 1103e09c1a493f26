"""Tests for configuration models and the YAML loader."""

import pytest
from pydantic import ValidationError

from simple_nominatim.core.config import (
    DEFAULT_BASE_URL,
    CacheConfig,
    ClientConfig,
    ConfigError,
    RateLimitConfig,
    RetryConfig,
    load_client_config,
    merge_config,
)


class TestModels:
    """Tests for defaults and validation."""

    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.cache == CacheConfig(enabled=True, ttl=300_000, max_size=500)
        assert config.rate_limit == RateLimitConfig(enabled=True, limit=1, interval=1000, strict=True)
        assert config.retry.max_attempts == 3
        assert config.retry.retryable_status_codes == frozenset({408, 429, 500, 502, 503, 504})

    def test_base_url_normalized(self):
        assert ClientConfig(base_url="http://localhost:8080/").base_url == "http://localhost:8080"

    def test_base_url_scheme_required(self):
        with pytest.raises(ValidationError):
            ClientConfig(base_url="localhost:8080")

    @pytest.mark.parametrize(
        "model,kwargs",
        [
            (CacheConfig, {"ttl": -1}),
            (CacheConfig, {"max_size": -1}),
            (RateLimitConfig, {"limit": 0}),
            (RetryConfig, {"max_attempts": 0}),
            (RetryConfig, {"backoff_multiplier": 0.5}),
            (RetryConfig, {"retryable_status_codes": [42]}),
        ],
    )
    def test_invalid_values(self, model, kwargs):
        with pytest.raises(ValidationError):
            model(**kwargs)

    def test_configs_are_hashable(self):
        assert hash(RetryConfig()) == hash(RetryConfig())
        assert len({CacheConfig(), CacheConfig(), CacheConfig(ttl=1)}) == 2


class TestMergeConfig:
    """Tests for per-call override merging."""

    def test_none_keeps_base(self):
        base = RetryConfig(max_attempts=5)
        assert merge_config(base, None) is base

    def test_only_set_fields_override(self):
        base = RetryConfig(max_attempts=5, initial_delay=10)
        merged = merge_config(base, RetryConfig(enabled=False))

        assert merged.enabled is False
        assert merged.max_attempts == 5
        assert merged.initial_delay == 10


class TestLoader:
    """Tests for load_client_config."""

    def test_missing_default_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_client_config() == ClientConfig()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_client_config(tmp_path / "absent.yaml")
        assert exc_info.value.path == tmp_path / "absent.yaml"

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "nominatim.yaml"
        path.write_text(
            "base_url: http://localhost:8080\n"
            "email: ops@example.com\n"
            "cache:\n"
            "  ttl: 1000\n"
            "rate_limit:\n"
            "  enabled: false\n"
            "retry:\n"
            "  retryable_status_codes: [503]\n",
            encoding="utf-8",
        )

        config = load_client_config(path)

        assert config.base_url == "http://localhost:8080"
        assert config.email == "ops@example.com"
        assert config.cache.ttl == 1000
        assert config.cache.max_size == 500
        assert config.rate_limit.enabled is False
        assert config.retry.retryable_status_codes == frozenset({503})

    def test_env_expansion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("NOMINATIM_URL", "http://geo.internal")
        monkeypatch.delenv("NOMINATIM_AGENT", raising=False)
        path = tmp_path / "nominatim.yaml"
        path.write_text(
            "base_url: ${NOMINATIM_URL}\nuser_agent: ${NOMINATIM_AGENT:-my-app/2.0}\n",
            encoding="utf-8",
        )

        config = load_client_config(path)

        assert config.base_url == "http://geo.internal"
        assert config.user_agent == "my-app/2.0"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "nominatim.yaml"
        path.write_text("", encoding="utf-8")
        assert load_client_config(path) == ClientConfig()

    @pytest.mark.parametrize(
        "content",
        ["base_url: [unclosed\n", "- just\n- a list\n", "cache:\n  ttl: -5\n"],
    )
    def test_invalid_files(self, tmp_path, content):
        path = tmp_path / "nominatim.yaml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigError):
            load_client_config(path)

    def test_accepts_string_path(self, tmp_path):
        path = tmp_path / "nominatim.yaml"
        path.write_text("timeout_seconds: 5\n", encoding="utf-8")
        assert load_client_config(str(path)).timeout_seconds == 5
