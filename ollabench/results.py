"""Benchmark results and per-model summaries."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class BenchmarkResult:
    """Outcome of one (model, test case) generation call."""

    model: str
    test_name: str
    category: str
    success: bool
    tokens_per_second: float = 0.0
    time_to_first_token_ms: float = 0.0  # load + prompt eval, not true streaming TTFT
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_time_ms: float = 0.0  # wall clock for the whole round trip
    response: str = ""
    error: Optional[str] = None
    estimated_ram_gb: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ModelSummary:
    """Everything recorded for one model that entered the executor."""

    model: str
    size_tag: str
    estimated_ram_gb: int
    avg_tokens_per_sec: float = 0.0
    avg_total_time_ms: float = 0.0
    results: tuple[BenchmarkResult, ...] = field(default_factory=tuple)
    can_run: bool = False
    skip_reason: Optional[str] = None
    cancelled: bool = False

    @property
    def successful_results(self) -> list[BenchmarkResult]:
        return [r for r in self.results if r.success]

    @property
    def failed_results(self) -> list[BenchmarkResult]:
        return [r for r in self.results if not r.success]

    @property
    def status(self) -> str:
        """``skipped``, ``cancelled``, ``failed``, ``partial`` or ``complete``."""
        if self.skip_reason is not None:
            return "skipped"
        if self.cancelled and not self.results:
            return "cancelled"
        if not self.can_run:
            return "failed"
        if self.failed_results or self.cancelled:
            return "partial"
        return "complete"

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "size_tag": self.size_tag,
            "estimated_ram_gb": self.estimated_ram_gb,
            "avg_tokens_per_sec": self.avg_tokens_per_sec,
            "avg_total_time_ms": self.avg_total_time_ms,
            "can_run": self.can_run,
            "skip_reason": self.skip_reason,
            "cancelled": self.cancelled,
            "status": self.status,
            "results": [r.to_dict() for r in self.results],
        }
