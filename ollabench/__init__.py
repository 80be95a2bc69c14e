"""ollabench — resource-aware benchmarking of local Ollama models.

Discovers model variants, filters them by estimated memory footprint,
runs a fixed prompt battery against each one and ranks the results::

    from ollabench import BenchConfig, OllamaClient, detect_snapshot, run_benchmark

    config = BenchConfig.from_dict({"llm_families": [{"name": "qwen2.5"}]})
    with OllamaClient(config.daemon.base_url) as client:
        report = run_benchmark(config, client, detect_snapshot())
    print(report.ranking[0].model if report.ranking else "nothing ran")
"""

from __future__ import annotations

__version__ = "0.3.0"

from .admission import AdmissionDecision, evaluate_admission, filter_testable
from .battery import DEFAULT_BATTERY, TestCase
from .catalog import REFERENCE_VARIANTS, build_catalog, reference_variants
from .config import BenchConfig, ConfigError, FamilyConfig, ResourceLimits, TestSettings, load_config
from .executor import BenchmarkExecutor, ExecutorListener, extract_metrics
from .footprint import estimate_footprint_gb, estimate_footprint_gb_substring, get_estimator
from .hardware import SystemSnapshot, detect_hardware, detect_snapshot
from .ollama import DaemonUnavailableError, GenerationError, OllamaClient, OllamaError, PullError
from .pipeline import RunPlan, plan_run, run_benchmark
from .ranking import BenchmarkReport, build_report, rank_by_category, rank_overall, recommend, summarize
from .report import render_report
from .results import BenchmarkResult, ModelSummary
from .sources import CatalogSource, StaticSource

__all__ = [
    "__version__",
    "AdmissionDecision",
    "BenchConfig",
    "BenchmarkExecutor",
    "BenchmarkReport",
    "BenchmarkResult",
    "CatalogSource",
    "ConfigError",
    "DEFAULT_BATTERY",
    "DaemonUnavailableError",
    "ExecutorListener",
    "FamilyConfig",
    "GenerationError",
    "ModelSummary",
    "OllamaClient",
    "OllamaError",
    "PullError",
    "REFERENCE_VARIANTS",
    "ResourceLimits",
    "RunPlan",
    "StaticSource",
    "SystemSnapshot",
    "TestCase",
    "TestSettings",
    "build_catalog",
    "build_report",
    "detect_hardware",
    "detect_snapshot",
    "estimate_footprint_gb",
    "estimate_footprint_gb_substring",
    "evaluate_admission",
    "extract_metrics",
    "filter_testable",
    "get_estimator",
    "load_config",
    "plan_run",
    "rank_by_category",
    "rank_overall",
    "recommend",
    "reference_variants",
    "render_report",
    "run_benchmark",
    "summarize",
]
