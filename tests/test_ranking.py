"""Tests for ollabench.ranking and ollabench.results."""

from __future__ import annotations

import pytest

from ollabench.admission import AdmissionDecision
from ollabench.hardware import SystemSnapshot
from ollabench.ranking import (
    best_in_category,
    build_report,
    rank_by_category,
    rank_overall,
    recommend,
    skipped,
    summarize,
)
from ollabench.results import BenchmarkResult


def _ok(model: str, tps: float, category: str = "reasoning", ms: float = 100.0) -> BenchmarkResult:
    return BenchmarkResult(
        model=model,
        test_name=category.title(),
        category=category,
        success=True,
        tokens_per_second=tps,
        total_time_ms=ms,
    )


def _fail(model: str, category: str = "coding") -> BenchmarkResult:
    return BenchmarkResult(model=model, test_name="x", category=category, success=False, error="boom")


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------


class TestSummarize:
    def test_averages_successes_only(self):
        s = summarize(
            "m:7b",
            [_ok("m:7b", 10, ms=100), _ok("m:7b", 20, ms=300), _fail("m:7b")],
            estimated_gb=5,
        )
        assert s.avg_tokens_per_sec == pytest.approx(15.0)
        assert s.avg_total_time_ms == pytest.approx(200.0)
        assert s.can_run is True
        assert s.size_tag == "7b"
        assert len(s.failed_results) == 1

    def test_no_successes(self):
        s = summarize("m:7b", [_fail("m:7b")], estimated_gb=5)
        assert s.can_run is False
        assert s.avg_tokens_per_sec == 0.0
        assert s.status == "failed"

    def test_skipped(self):
        s = skipped("m:7b", "model not installed", 5)
        assert s.status == "skipped"
        assert s.to_dict()["skip_reason"] == "model not installed"
        assert s.to_dict()["results"] == []

    def test_cancelled_without_results(self):
        assert summarize("m:7b", [], 5, cancelled=True).status == "cancelled"


# ---------------------------------------------------------------------------
# Rankings
# ---------------------------------------------------------------------------


class TestRankings:
    def test_descending(self):
        a = summarize("a:1b", [_ok("a:1b", 30)], 2)
        b = summarize("b:1b", [_ok("b:1b", 60)], 2)
        c = summarize("c:1b", [_fail("c:1b")], 2)
        assert [s.model for s in rank_overall([a, b, c])] == ["b:1b", "a:1b"]

    def test_ties_keep_input_order(self):
        summaries = [summarize(m, [_ok(m, 25)], 2) for m in ["z:1b", "a:1b", "m:1b"]]
        assert [s.model for s in rank_overall(summaries)] == ["z:1b", "a:1b", "m:1b"]

    def test_categories_first_observed_order(self):
        a = summarize("a:1b", [_ok("a:1b", 10, "math"), _ok("a:1b", 40, "qa")], 2)
        b = summarize("b:1b", [_ok("b:1b", 20, "math"), _fail("b:1b", "qa"), _ok("b:1b", 5, "coding")], 2)
        categories = rank_by_category([a, b])
        assert list(categories) == ["math", "qa", "coding"]
        assert [e.model for e in categories["math"]] == ["b:1b", "a:1b"]
        assert [e.model for e in categories["qa"]] == ["a:1b"]

    def test_best_in_category_tie(self):
        a = summarize("a:1b", [_ok("a:1b", 10, "math")], 2)
        b = summarize("b:1b", [_ok("b:1b", 10, "math")], 2)
        best = best_in_category(rank_by_category([a, b]))
        assert best["math"].model == "a:1b"


class TestRecommend:
    def test_best_and_most_efficient(self):
        big = summarize("big:70b", [_ok("big:70b", 50)], 40)
        small = summarize("small:1b", [_ok("small:1b", 20)], 2)
        broken = summarize("tiny:0.5b", [_fail("tiny:0.5b")], 1)
        rec = recommend([big, small, broken])
        assert rec.best_overall.model == "big:70b"
        assert rec.most_efficient.model == "small:1b"
        assert rec.most_efficient_gb == 2

    def test_efficiency_tie_keeps_order(self):
        a = summarize("a:1b", [_ok("a:1b", 5)], 2)
        b = summarize("b:1b", [_ok("b:1b", 50)], 2)
        assert recommend([a, b]).most_efficient.model == "a:1b"

    def test_nothing_runnable(self):
        rec = recommend([skipped("a:1b", "model not installed", 2)])
        assert rec.best_overall is None
        assert rec.most_efficient is None


class TestBuildReport:
    def test_to_dict(self):
        snap = SystemSnapshot.from_total(16, "x86_64")
        decisions = [
            AdmissionDecision("a:1b", 2, True),
            AdmissionDecision("big:70b", 40, False, "insufficient memory"),
        ]
        summaries = [summarize("a:1b", [_ok("a:1b", 42)], 2)]
        report = build_report(snap, decisions, summaries)
        d = report.to_dict()
        assert report.admitted == ["a:1b"]
        assert [r.model for r in report.rejected] == ["big:70b"]
        assert d["catalog"] == ["a:1b", "big:70b"]
        assert d["ranking"] == [
            {"rank": 1, "model": "a:1b", "avg_tokens_per_sec": 42.0, "avg_total_time_ms": 100.0}
        ]
        assert d["best_in_category"]["reasoning"]["model"] == "a:1b"
        assert d["recommendations"]["most_efficient_gb"] == 2
        assert d["interrupted"] is False
