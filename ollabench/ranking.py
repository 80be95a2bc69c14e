"""Aggregation and ranking of benchmark results.

Averages only ever include successful results. All orderings are stable, so
models that tie keep their catalog order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from .admission import AdmissionDecision
from .catalog import size_tag
from .footprint import Estimator, estimate_footprint_gb
from .hardware import SystemSnapshot
from .results import BenchmarkResult, ModelSummary


@dataclass(frozen=True)
class CategoryEntry:
    """One model's result in one prompt category."""

    model: str
    result: BenchmarkResult

    @property
    def tokens_per_second(self) -> float:
        return self.result.tokens_per_second


@dataclass(frozen=True)
class Recommendations:
    best_overall: Optional[ModelSummary] = None
    most_efficient: Optional[ModelSummary] = None
    most_efficient_gb: int = 0


@dataclass
class BenchmarkReport:
    """Everything a run produced, ready for rendering or JSON export."""

    system: SystemSnapshot
    decisions: list[AdmissionDecision]
    summaries: list[ModelSummary]
    ranking: list[ModelSummary]
    categories: dict[str, list[CategoryEntry]]
    best_in_category: dict[str, CategoryEntry]
    recommendations: Recommendations
    interrupted: bool = False
    catalog: list[str] = field(default_factory=list)

    @property
    def admitted(self) -> list[str]:
        return [d.model for d in self.decisions if d.admitted]

    @property
    def rejected(self) -> list[AdmissionDecision]:
        return [d for d in self.decisions if not d.admitted]

    def to_dict(self) -> dict[str, Any]:
        rec = self.recommendations
        return {
            "system": self.system.to_dict(),
            "catalog": list(self.catalog),
            "admission": [d.to_dict() for d in self.decisions],
            "summaries": [s.to_dict() for s in self.summaries],
            "ranking": [
                {
                    "rank": i + 1,
                    "model": s.model,
                    "avg_tokens_per_sec": s.avg_tokens_per_sec,
                    "avg_total_time_ms": s.avg_total_time_ms,
                }
                for i, s in enumerate(self.ranking)
            ],
            "categories": {
                category: [
                    {"model": e.model, "tokens_per_second": e.tokens_per_second}
                    for e in entries
                ]
                for category, entries in self.categories.items()
            },
            "best_in_category": {
                category: {"model": e.model, "tokens_per_second": e.tokens_per_second}
                for category, e in self.best_in_category.items()
            },
            "recommendations": {
                "best_overall": rec.best_overall.model if rec.best_overall else None,
                "most_efficient": rec.most_efficient.model if rec.most_efficient else None,
                "most_efficient_gb": rec.most_efficient_gb,
            },
            "interrupted": self.interrupted,
        }


# ---------------------------------------------------------------------------
# Per-model aggregation
# ---------------------------------------------------------------------------


def summarize(
    model: str,
    results: Sequence[BenchmarkResult],
    estimated_gb: int,
    cancelled: bool = False,
) -> ModelSummary:
    """Average throughput and latency over the successful results only."""
    successes = [r for r in results if r.success]
    if successes:
        avg_tps = sum(r.tokens_per_second for r in successes) / len(successes)
        avg_time = sum(r.total_time_ms for r in successes) / len(successes)
    else:
        avg_tps = avg_time = 0.0
    return ModelSummary(
        model=model,
        size_tag=size_tag(model),
        estimated_ram_gb=estimated_gb,
        avg_tokens_per_sec=avg_tps,
        avg_total_time_ms=avg_time,
        results=tuple(results),
        can_run=bool(successes),
        cancelled=cancelled,
    )


def skipped(model: str, reason: str, estimated_gb: int) -> ModelSummary:
    """Summary for a model that never ran (not installed, pull failed)."""
    return ModelSummary(
        model=model,
        size_tag=size_tag(model),
        estimated_ram_gb=estimated_gb,
        can_run=False,
        skip_reason=reason,
    )


# ---------------------------------------------------------------------------
# Rankings
# ---------------------------------------------------------------------------


def rank_overall(summaries: Iterable[ModelSummary]) -> list[ModelSummary]:
    """Runnable models by descending average tokens/sec."""
    runnable = [s for s in summaries if s.can_run]
    return sorted(runnable, key=lambda s: s.avg_tokens_per_sec, reverse=True)


def rank_by_category(
    summaries: Iterable[ModelSummary],
) -> dict[str, list[CategoryEntry]]:
    """Per category, every runnable model's successful result, fastest first.

    Categories appear in the order they were first observed.
    """
    categories: dict[str, list[CategoryEntry]] = {}
    for summary in summaries:
        if not summary.can_run:
            continue
        for result in summary.successful_results:
            categories.setdefault(result.category, []).append(
                CategoryEntry(summary.model, result)
            )
    return {
        category: sorted(entries, key=lambda e: e.tokens_per_second, reverse=True)
        for category, entries in categories.items()
    }


def best_in_category(
    categories: dict[str, list[CategoryEntry]],
) -> dict[str, CategoryEntry]:
    """Fastest entry per category; the first observed wins an exact tie."""
    return {category: entries[0] for category, entries in categories.items() if entries}


def recommend(
    summaries: Sequence[ModelSummary],
    estimator: Estimator = estimate_footprint_gb,
) -> Recommendations:
    ranking = rank_overall(summaries)
    if not ranking:
        return Recommendations()

    most_efficient: Optional[ModelSummary] = None
    smallest = 0
    for summary in summaries:
        if not summary.can_run:
            continue
        estimate = estimator(summary.model)
        if most_efficient is None or estimate < smallest:
            most_efficient, smallest = summary, estimate
    return Recommendations(
        best_overall=ranking[0],
        most_efficient=most_efficient,
        most_efficient_gb=smallest,
    )


def build_report(
    system: SystemSnapshot,
    decisions: list[AdmissionDecision],
    summaries: list[ModelSummary],
    estimator: Estimator = estimate_footprint_gb,
    interrupted: bool = False,
    catalog: Optional[list[str]] = None,
) -> BenchmarkReport:
    categories = rank_by_category(summaries)
    return BenchmarkReport(
        system=system,
        decisions=decisions,
        summaries=summaries,
        ranking=rank_overall(summaries),
        categories=categories,
        best_in_category=best_in_category(categories),
        recommendations=recommend(summaries, estimator),
        interrupted=interrupted,
        catalog=list(catalog) if catalog is not None else [d.model for d in decisions],
    )
