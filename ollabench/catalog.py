"""Variant catalog: which ``family:size-tag`` identifiers to consider.

Combines the models already installed on the daemon with a static table of
well-known variants per family. Pure computation, no daemon calls.
"""

from __future__ import annotations

from typing import Iterable

from .config import FamilyConfig

# Known variants per family, added when ``test_all_variants`` is set.
REFERENCE_VARIANTS: dict[str, tuple[str, ...]] = {
    "qwen2.5": (
        "qwen2.5:0.5b",
        "qwen2.5:1.5b",
        "qwen2.5:3b",
        "qwen2.5:7b",
        "qwen2.5:14b",
        "qwen2.5:32b",
    ),
    "gemma2": ("gemma2:2b", "gemma2:9b", "gemma2:27b"),
    "llama3.2": ("llama3.2:1b", "llama3.2:3b"),
    "llama3.1": ("llama3.1:8b", "llama3.1:70b", "llama3.1:405b"),
    "mistral": ("mistral:7b", "mistral:latest"),
    "codellama": ("codellama:7b", "codellama:13b", "codellama:34b", "codellama:70b"),
    "phi3": ("phi3:mini", "phi3:medium"),
    "deepseek-coder": (
        "deepseek-coder:1.3b",
        "deepseek-coder:6.7b",
        "deepseek-coder:33b",
    ),
}


def reference_variants(family: str) -> list[str]:
    """Known variants of ``family``; unknown families get ``family:latest``."""
    variants = REFERENCE_VARIANTS.get(family)
    if variants is None:
        return [f"{family}:latest"]
    return list(variants)


def all_reference_variants() -> list[str]:
    return sorted({v for variants in REFERENCE_VARIANTS.values() for v in variants})


def build_catalog(
    families: Iterable[FamilyConfig],
    installed_names: Iterable[str],
) -> list[str]:
    """Return the sorted, de-duplicated variant identifiers to consider.

    For every enabled family this includes each installed model whose name
    starts with the family name (a literal prefix, so ``llama3`` also picks
    up ``llama3.1:8b``) and, with ``test_all_variants``, the family's
    reference variants.

    An empty result is not an error; callers treat it as "nothing to test".
    """
    installed = list(installed_names)
    found: set[str] = set()
    for family in families:
        if not family.enabled:
            continue
        found.update(name for name in installed if name.startswith(family.name))
        if family.test_all_variants:
            found.update(reference_variants(family.name))
    return sorted(found)


def split_identifier(identifier: str) -> tuple[str, str]:
    """Split ``family:size-tag``; the tag is ``"unknown"`` when absent."""
    if ":" in identifier:
        family, tag = identifier.split(":", 1)
        return family, tag
    return identifier, "unknown"


def size_tag(identifier: str) -> str:
    return split_identifier(identifier)[1]
