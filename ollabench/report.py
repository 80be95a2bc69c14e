"""Plain-text rendering of benchmark reports.

Pure functions over the report data structures; nothing here prints or
talks to the daemon.
"""

from __future__ import annotations

from typing import Sequence

from .admission import AdmissionDecision
from .hardware import HardwareProfile, SystemSnapshot
from .ranking import BenchmarkReport
from .results import ModelSummary

_WIDTH = 78
_HEAVY = "=" * _WIDTH
_LIGHT = "-" * _WIDTH


def render_system(system: SystemSnapshot) -> list[str]:
    return [
        "System Info:",
        f"  Total RAM:      {system.total_gb} GB",
        f"  Available RAM:  {system.available_gb} GB (for models)",
        f"  Architecture:   {system.architecture}",
    ]


def render_admission(catalog: Sequence[str], decisions: Sequence[AdmissionDecision]) -> list[str]:
    lines = [f"Found {len(catalog)} model variant(s) to consider:"]
    lines += [f"  - {model}" for model in catalog]

    admitted = [d for d in decisions if d.admitted]
    rejected = [d for d in decisions if not d.admitted]
    lines.append("")
    lines.append(f"{len(admitted)} model(s) are testable on this system:")
    lines += [f"  ✓ {d.model:<28s} ~{d.estimated_gb} GB" for d in admitted]
    if rejected:
        lines.append("")
        lines.append(f"{len(rejected)} model(s) skipped due to insufficient resources:")
        lines += [f"  ✗ {d.model:<28s} {d.reason}" for d in rejected]
    return lines


def _outcome(summary: ModelSummary) -> str:
    total = len(summary.results)
    passed = len(summary.successful_results)
    status = summary.status
    if status == "skipped":
        return f"skipped: {summary.skip_reason}"
    if status == "cancelled":
        return "cancelled before any test ran"
    if status == "complete":
        return f"{passed}/{total} tests passed"
    first_error = summary.failed_results[0].error if summary.failed_results else None
    text = f"{passed}/{total} tests passed"
    if summary.cancelled:
        text += ", cancelled"
    if first_error:
        text += f" (test failed: {first_error})"
    return text


def render_outcomes(summaries: Sequence[ModelSummary]) -> list[str]:
    lines = ["Model Outcomes:", _LIGHT]
    lines += [f"  {s.model:<28s} {_outcome(s)}" for s in summaries]
    return lines


def render_ranking(report: BenchmarkReport) -> list[str]:
    lines = ["Overall Performance Ranking (by avg tokens/sec):", _HEAVY]
    if not report.ranking:
        lines.append("  No model completed a test.")
        return lines
    for i, s in enumerate(report.ranking, start=1):
        lines.append(
            f"{i:>2d}. {s.model:<28s} | Size: {s.size_tag:<8s} | "
            f"Avg Speed: {s.avg_tokens_per_sec:7.2f} t/s | "
            f"Avg Time: {s.avg_total_time_ms:9.2f} ms"
        )
    return lines


def render_categories(report: BenchmarkReport) -> list[str]:
    lines: list[str] = []
    for category, entries in report.categories.items():
        lines += ["", f"Category: {category}", _HEAVY]
        for e in entries:
            r = e.result
            lines.append(
                f"{e.model:<28s} | {r.tokens_per_second:7.2f} t/s | "
                f"{r.total_time_ms:9.2f} ms | {r.completion_tokens} tokens"
            )
    if report.best_in_category:
        lines += ["", "Best Model for Each Category:", _HEAVY]
        for category, e in report.best_in_category.items():
            lines.append(f"{category:<15s}: {e.model} ({e.tokens_per_second:.2f} t/s)")
    return lines


def render_recommendations(report: BenchmarkReport) -> list[str]:
    rec = report.recommendations
    system = report.system
    lines = ["=== Recommendations for Your System ===", _HEAVY]
    if rec.best_overall is not None:
        lines.append(
            f"✓ Best overall performer: {rec.best_overall.model} "
            f"({rec.best_overall.avg_tokens_per_sec:.2f} t/s)"
        )
    if rec.most_efficient is not None:
        lines.append(
            f"✓ Most efficient (smallest): {rec.most_efficient.model} "
            f"(~{rec.most_efficient_gb} GB RAM)"
        )
    if rec.best_overall is None:
        lines.append("No model produced a successful result; nothing to recommend.")
    lines.append("")
    lines.append(f"System capacity: {system.available_gb} GB RAM available for LLMs")
    lines.append(f"Architecture: {system.architecture}")
    if system.architecture == "arm64":
        lines.append("✓ Apple Silicon detected - unified memory with Metal acceleration")
    return lines


def render_report(report: BenchmarkReport, include_preamble: bool = True) -> str:
    """The human-readable report for one run.

    ``include_preamble=False`` leaves out the system and admission sections
    for callers that already printed them before the run started.
    """
    sections: list[list[str]] = []
    if include_preamble:
        sections.append(render_system(report.system))
        sections.append(render_admission(report.catalog, report.decisions))
    if report.summaries:
        sections.append(render_outcomes(report.summaries))
    sections.append(["=== Benchmark Results ==="] + [""] + render_ranking(report) + render_categories(report))
    sections.append(render_recommendations(report))
    if report.interrupted:
        sections.append(["Run interrupted; results above cover completed tests only."])
    return "\n\n".join("\n".join(section) for section in sections)


# ---------------------------------------------------------------------------
# ollabench check
# ---------------------------------------------------------------------------


def capacity_tier(total_gb: int) -> tuple[str, str]:
    """A one-line capacity verdict and suggested models for a RAM size."""
    if total_gb >= 64:
        return (
            "plenty of RAM for large models (32B-70B with Q4)",
            "llama3.1:70b, qwen2.5:32b, codellama:34b",
        )
    if total_gb >= 32:
        return (
            "good RAM for medium-sized models (7B-32B with Q4)",
            "llama3.1:8b, qwen2.5:14b, deepseek-coder:33b",
        )
    if total_gb >= 16:
        return (
            "sufficient RAM for small-medium models (1B-14B with Q4)",
            "qwen2.5:7b, phi3:medium, deepseek-coder:6.7b",
        )
    return (
        "limited RAM - stick to smaller models (0.5B-3B)",
        "llama3.2:3b, qwen2.5:1.5b, phi3:mini",
    )


def render_compatibility(
    profile: HardwareProfile,
    decisions: Sequence[AdmissionDecision],
    min_free_gb: int,
) -> str:
    snap = profile.snapshot
    lines = [
        "System Information:",
        f"  OS:            {profile.platform}",
        f"  Architecture:  {snap.architecture}",
        f"  CPU:           {profile.cpu.brand} ({profile.cpu.cores} cores, {profile.cpu.threads} threads)",
        f"  Total RAM:     {snap.total_gb} GB",
        f"  GPU:           {profile.gpu_name or 'unknown'}",
        f"  Metal API:     {'yes' if profile.has_metal else 'no'}",
        f"  For models:    {snap.available_gb} GB (keeping {min_free_gb} GB free on top)",
        "",
        "Compatible Models:",
    ]
    compatible = [d for d in decisions if d.admitted]
    incompatible = [d for d in decisions if not d.admitted]
    lines += [f"  ✓ {d.model:<28s} ~{d.estimated_gb} GB" for d in compatible] or ["  None"]
    lines += ["", "Incompatible Models:"]
    lines += [f"  ✗ {d.model:<28s} {d.reason}" for d in incompatible] or ["  None"]

    verdict, suggested = capacity_tier(snap.total_gb)
    lines += [
        "",
        "Recommendations:",
        f"  You have {verdict}.",
        f"  Suggested: {suggested}",
        "",
        "All estimates assume Q4 quantization (~0.5-0.6 GB per billion parameters).",
        "Q5 needs about 20% more RAM, Q8 about 50% more.",
    ]
    return "\n".join(lines)
