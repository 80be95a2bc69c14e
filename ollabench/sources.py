"""Where the candidate model variants come from.

``CatalogSource`` derives candidates from the configured families and the
daemon's installed models; ``StaticSource`` is a fixed list given on the
command line. Both feed the same admission filter and executor.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .catalog import build_catalog
from .config import FamilyConfig
from .ollama import OllamaClient

# Quick small-model sweep used when no families are configured.
DEFAULT_STATIC_MODELS: tuple[str, ...] = (
    "llama3.2:1b",
    "llama3.2:3b",
    "gemma2:2b",
    "qwen2.5:0.5b",
)


class ModelSource:
    """Base class for model-list sources."""

    name: str = "base"

    def models(self, client: OllamaClient) -> list[str]:
        """Return the candidate identifiers, without duplicates."""
        raise NotImplementedError


class CatalogSource(ModelSource):
    """Variants discovered from configured families and installed models."""

    name = "catalog"

    def __init__(self, families: Sequence[FamilyConfig]) -> None:
        self.families = list(families)

    def models(self, client: OllamaClient) -> list[str]:
        # DaemonUnavailableError propagates: no listing means no run.
        return build_catalog(self.families, client.installed_names())


class StaticSource(ModelSource):
    """An explicit list of identifiers, order preserved."""

    name = "static"

    def __init__(self, models: Iterable[str] = DEFAULT_STATIC_MODELS) -> None:
        self._models = list(dict.fromkeys(m.strip() for m in models if m.strip()))

    def models(self, client: OllamaClient) -> list[str]:
        return list(self._models)
