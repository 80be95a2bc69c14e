"""Tests for ollabench.config."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from ollabench.config import (
    DEFAULT_OLLAMA_URL,
    BenchConfig,
    ConfigError,
    DaemonSettings,
    FamilyConfig,
    ResourceLimits,
    TestSettings,
    load_config,
)

SAMPLE = {
    "llm_families": [
        {"name": "qwen2.5", "enabled": True, "test_all_variants": True},
        {"name": "gemma2", "enabled": False},
    ],
    "resource_limits": {"max_ram_usage_percent": 75, "min_free_ram_gb": 4},
    "test_settings": {
        "auto_pull_models": True,
        "skip_if_insufficient_resources": False,
        "parallel_testing": False,
    },
    "ollama": {"base_url": "http://gpu-box:11434/", "request_timeout_s": 120},
}


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_empty_dict_gives_defaults(self, monkeypatch):
        monkeypatch.delenv("OLLAMA_HOST", raising=False)
        config = BenchConfig.from_dict({})
        assert config.families == ()
        assert config.limits == ResourceLimits()
        assert config.limits.min_free_ram_gb == 2
        assert config.limits.footprint_estimator == "numeric"
        assert config.settings.auto_pull_models is False
        assert config.settings.skip_if_insufficient_resources is True
        assert config.daemon.base_url == DEFAULT_OLLAMA_URL

    def test_ollama_host_env(self, monkeypatch):
        monkeypatch.setenv("OLLAMA_HOST", "10.0.0.5:11434")
        assert DaemonSettings().base_url == "http://10.0.0.5:11434"

    @pytest.mark.parametrize("host", ["0.0.0.0", "127.0.0.1"])
    def test_ollama_host_without_port_gets_default_port(self, monkeypatch, host):
        monkeypatch.setenv("OLLAMA_HOST", host)
        url = httpx.URL(DaemonSettings().base_url)
        assert url.host == host
        assert url.port == 11434

    def test_ollama_host_with_scheme_kept(self, monkeypatch):
        monkeypatch.setenv("OLLAMA_HOST", "https://ollama.example.com/")
        assert DaemonSettings().base_url == "https://ollama.example.com"

    def test_explicit_base_url_beats_env(self, monkeypatch):
        monkeypatch.setenv("OLLAMA_HOST", "10.0.0.5:11434")
        d = DaemonSettings.from_dict({"base_url": "http://other:1"})
        assert d.base_url == "http://other:1"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestFromDict:
    def test_full_sample(self):
        config = BenchConfig.from_dict(SAMPLE)
        assert config.families[0] == FamilyConfig("qwen2.5", True, True)
        assert config.families[1].enabled is False
        assert [f.name for f in config.enabled_families] == ["qwen2.5"]
        assert config.limits.max_ram_usage_percent == 75
        assert config.limits.min_free_ram_gb == 4
        assert config.settings.auto_pull_models is True
        assert config.settings.skip_if_insufficient_resources is False
        assert config.daemon.base_url == "http://gpu-box:11434"
        assert config.daemon.request_timeout_s == 120.0

    def test_to_dict_shape(self):
        d = BenchConfig.from_dict(SAMPLE).to_dict()
        assert set(d) == {"llm_families", "resource_limits", "test_settings", "ollama"}
        assert d["llm_families"][0]["name"] == "qwen2.5"
        assert d["resource_limits"]["min_free_ram_gb"] == 4

    def test_family_without_name(self):
        with pytest.raises(ConfigError, match="no name"):
            BenchConfig.from_dict({"llm_families": [{"enabled": True}]})

    def test_family_name_with_whitespace_rejected(self):
        with pytest.raises(ConfigError, match="surrounding whitespace"):
            BenchConfig.from_dict({"llm_families": [{"name": " qwen2.5"}]})

    def test_families_not_a_list(self):
        with pytest.raises(ConfigError, match="must be a list"):
            BenchConfig.from_dict({"llm_families": {"name": "qwen2.5"}})

    def test_section_not_an_object(self):
        with pytest.raises(ConfigError, match="resource_limits"):
            BenchConfig.from_dict({"resource_limits": [1, 2]})

    def test_root_not_an_object(self):
        with pytest.raises(ConfigError):
            BenchConfig.from_dict([])  # type: ignore[arg-type]

    @pytest.mark.parametrize("pct", [0, 101, -5])
    def test_percent_out_of_range(self, pct):
        with pytest.raises(ConfigError, match="max_ram_usage_percent"):
            ResourceLimits.from_dict({"max_ram_usage_percent": pct})

    def test_negative_min_free(self):
        with pytest.raises(ConfigError, match="min_free_ram_gb"):
            ResourceLimits.from_dict({"min_free_ram_gb": -1})

    def test_string_where_bool_expected(self):
        with pytest.raises(ConfigError, match="auto_pull_models"):
            TestSettings.from_dict({"auto_pull_models": "yes"})

    def test_bool_is_not_an_int(self):
        with pytest.raises(ConfigError, match="min_free_ram_gb"):
            ResourceLimits.from_dict({"min_free_ram_gb": True})

    def test_unknown_estimator(self):
        with pytest.raises(ConfigError, match="footprint_estimator"):
            ResourceLimits.from_dict({"footprint_estimator": "guess"})

    def test_substring_estimator_accepted(self):
        assert ResourceLimits.from_dict({"footprint_estimator": "substring"}).footprint_estimator == "substring"

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigError, match="positive"):
            DaemonSettings.from_dict({"request_timeout_s": 0})

    def test_parallel_testing_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ollabench.config"):
            config = BenchConfig.from_dict({"test_settings": {"parallel_testing": True}})
        assert config.settings.parallel_testing is True
        assert "sequentially" in caplog.text


# ---------------------------------------------------------------------------
# Overrides and loading
# ---------------------------------------------------------------------------


class TestOverrides:
    def test_overrides_applied(self):
        config = BenchConfig.from_dict(SAMPLE).with_overrides(
            base_url="http://x:1/", request_timeout_s=30.0, auto_pull_models=False
        )
        assert config.daemon.base_url == "http://x:1"
        assert config.daemon.request_timeout_s == 30.0
        assert config.settings.auto_pull_models is False

    def test_no_overrides_keeps_values(self):
        original = BenchConfig.from_dict(SAMPLE)
        assert original.with_overrides() == original


class TestLoadConfig:
    def test_load_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(SAMPLE))
        config = load_config(path)
        assert config.families[0].name == "qwen2.5"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_config(path)
