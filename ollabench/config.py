"""Run configuration: model families, resource limits and test settings.

Read once from a JSON file (``config.json`` by default) and treated as
immutable for the rest of the run::

    {
      "llm_families": [
        {"name": "qwen2.5", "enabled": true, "test_all_variants": true}
      ],
      "resource_limits": {"max_ram_usage_percent": 80, "min_free_ram_gb": 2},
      "test_settings": {
        "auto_pull_models": false,
        "skip_if_insufficient_resources": true,
        "parallel_testing": false
      },
      "ollama": {"base_url": "http://localhost:11434"}
    }

Every section is optional; missing keys fall back to the defaults below.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional, Union

import httpx

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_OLLAMA_PORT = 11434
DEFAULT_OLLAMA_URL = f"http://localhost:{DEFAULT_OLLAMA_PORT}"

# Model loads can take minutes on a cold daemon.
DEFAULT_REQUEST_TIMEOUT_S = 600.0
DEFAULT_PULL_TIMEOUT_S = 3600.0

FOOTPRINT_ESTIMATORS = ("numeric", "substring")


class ConfigError(ValueError):
    """Raised when the configuration file is unreadable or invalid."""


def _default_base_url() -> str:
    host = os.environ.get("OLLAMA_HOST", "").strip()
    if not host:
        return DEFAULT_OLLAMA_URL
    # A bare host means the daemon default port; an explicit scheme keeps
    # that scheme's own default, as the ollama CLI does.
    if "://" in host:
        return host.rstrip("/")
    try:
        url = httpx.URL(f"http://{host}")
    except httpx.InvalidURL as exc:
        raise ConfigError(f"OLLAMA_HOST is not a valid address: {host!r}") from exc
    if url.port is None:
        url = url.copy_with(port=DEFAULT_OLLAMA_PORT)
    return str(url).rstrip("/")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FamilyConfig:
    """A model family to discover variants for (e.g. ``qwen2.5``)."""

    name: str
    enabled: bool = True
    test_all_variants: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FamilyConfig:
        name = d.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"llm_families entry has no name: {d!r}")
        if name != name.strip():
            raise ConfigError(
                f"llm_families name {name!r} has surrounding whitespace; "
                "names are matched as literal prefixes"
            )
        return cls(
            name=name,
            enabled=_as_bool(d, "enabled", True),
            test_all_variants=_as_bool(d, "test_all_variants", False),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "enabled": self.enabled,
            "test_all_variants": self.test_all_variants,
        }


@dataclass(frozen=True)
class ResourceLimits:
    """Memory limits applied by the admission filter.

    ``max_ram_usage_percent`` is validated and reported but does not take
    part in admission; ``min_free_ram_gb`` is the safety margin added on
    top of every footprint estimate.
    """

    max_ram_usage_percent: int = 80
    min_free_ram_gb: int = 2
    footprint_estimator: str = "numeric"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ResourceLimits:
        pct = _as_int(d, "max_ram_usage_percent", 80)
        if not 1 <= pct <= 100:
            raise ConfigError(
                f"resource_limits.max_ram_usage_percent must be 1-100, got {pct}"
            )
        min_free = _as_int(d, "min_free_ram_gb", 2)
        if min_free < 0:
            raise ConfigError(
                f"resource_limits.min_free_ram_gb must be >= 0, got {min_free}"
            )
        estimator = d.get("footprint_estimator", "numeric")
        if estimator not in FOOTPRINT_ESTIMATORS:
            raise ConfigError(
                f"resource_limits.footprint_estimator must be one of "
                f"{', '.join(FOOTPRINT_ESTIMATORS)}, got {estimator!r}"
            )
        return cls(
            max_ram_usage_percent=pct,
            min_free_ram_gb=min_free,
            footprint_estimator=estimator,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_ram_usage_percent": self.max_ram_usage_percent,
            "min_free_ram_gb": self.min_free_ram_gb,
            "footprint_estimator": self.footprint_estimator,
        }


@dataclass(frozen=True)
class TestSettings:
    """Executor behaviour switches."""

    __test__ = False  # not a pytest class

    auto_pull_models: bool = False
    skip_if_insufficient_resources: bool = True
    parallel_testing: bool = False  # accepted but inert; runs are sequential

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TestSettings:
        return cls(
            auto_pull_models=_as_bool(d, "auto_pull_models", False),
            skip_if_insufficient_resources=_as_bool(
                d, "skip_if_insufficient_resources", True
            ),
            parallel_testing=_as_bool(d, "parallel_testing", False),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "auto_pull_models": self.auto_pull_models,
            "skip_if_insufficient_resources": self.skip_if_insufficient_resources,
            "parallel_testing": self.parallel_testing,
        }


@dataclass(frozen=True)
class DaemonSettings:
    """Where the Ollama daemon lives and how long to wait for it."""

    base_url: str = field(default_factory=_default_base_url)
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    pull_timeout_s: float = DEFAULT_PULL_TIMEOUT_S

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DaemonSettings:
        base_url = d.get("base_url") or _default_base_url()
        if not isinstance(base_url, str):
            raise ConfigError(f"ollama.base_url must be a string, got {base_url!r}")
        request_timeout = _as_float(d, "request_timeout_s", DEFAULT_REQUEST_TIMEOUT_S)
        pull_timeout = _as_float(d, "pull_timeout_s", DEFAULT_PULL_TIMEOUT_S)
        if request_timeout <= 0 or pull_timeout <= 0:
            raise ConfigError("ollama timeouts must be positive")
        return cls(
            base_url=base_url.rstrip("/"),
            request_timeout_s=request_timeout,
            pull_timeout_s=pull_timeout,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_url": self.base_url,
            "request_timeout_s": self.request_timeout_s,
            "pull_timeout_s": self.pull_timeout_s,
        }


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchConfig:
    """Complete, validated configuration for one benchmark run."""

    families: tuple[FamilyConfig, ...] = ()
    limits: ResourceLimits = field(default_factory=ResourceLimits)
    settings: TestSettings = field(default_factory=TestSettings)
    daemon: DaemonSettings = field(default_factory=DaemonSettings)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> BenchConfig:
        if not isinstance(d, dict):
            raise ConfigError("configuration root must be a JSON object")
        raw_families = d.get("llm_families", [])
        if not isinstance(raw_families, list):
            raise ConfigError("llm_families must be a list")
        families = tuple(
            FamilyConfig.from_dict(_section(entry, "llm_families[]"))
            for entry in raw_families
        )
        config = cls(
            families=families,
            limits=ResourceLimits.from_dict(_section(d.get("resource_limits", {}), "resource_limits")),
            settings=TestSettings.from_dict(_section(d.get("test_settings", {}), "test_settings")),
            daemon=DaemonSettings.from_dict(_section(d.get("ollama", {}), "ollama")),
        )
        if config.settings.parallel_testing:
            logger.warning(
                "parallel_testing is not supported; models are benchmarked sequentially"
            )
        return config

    def to_dict(self) -> dict[str, Any]:
        return {
            "llm_families": [f.to_dict() for f in self.families],
            "resource_limits": self.limits.to_dict(),
            "test_settings": self.settings.to_dict(),
            "ollama": self.daemon.to_dict(),
        }

    @property
    def enabled_families(self) -> list[FamilyConfig]:
        return [f for f in self.families if f.enabled]

    def with_overrides(
        self,
        base_url: Optional[str] = None,
        request_timeout_s: Optional[float] = None,
        auto_pull_models: Optional[bool] = None,
    ) -> BenchConfig:
        """Return a copy with CLI overrides applied."""
        daemon = self.daemon
        if base_url:
            daemon = replace(daemon, base_url=base_url.rstrip("/"))
        if request_timeout_s is not None:
            daemon = replace(daemon, request_timeout_s=request_timeout_s)
        settings = self.settings
        if auto_pull_models is not None:
            settings = replace(settings, auto_pull_models=auto_pull_models)
        return replace(self, daemon=daemon, settings=settings)


def load_config(path: Union[str, Path]) -> BenchConfig:
    """Load and validate a JSON configuration file.

    Raises
    ------
    ConfigError
        If the file cannot be read, is not valid JSON, or fails validation.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"config file {path} is not valid JSON: {exc}") from exc
    config = BenchConfig.from_dict(data)
    logger.debug(
        "Loaded config from %s (%d families)", path, len(config.families)
    )
    return config


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def _section(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a JSON object, got {type(value).__name__}")
    return value


def _as_bool(d: dict[str, Any], key: str, default: bool) -> bool:
    value = d.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def _as_int(d: dict[str, Any], key: str, default: int) -> int:
    value = d.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


def _as_float(d: dict[str, Any], key: str, default: float) -> float:
    value = d.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    return float(value)
