"""End-to-end tests for ollabench.pipeline with an in-memory daemon."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ollabench.config import BenchConfig
from ollabench.hardware import SystemSnapshot
from ollabench.ollama import DaemonUnavailableError
from ollabench.pipeline import finish_report, make_executor, plan_run, run_benchmark
from ollabench.sources import StaticSource


def _config(**test_settings) -> BenchConfig:
    return BenchConfig.from_dict(
        {
            "llm_families": [{"name": "demo", "enabled": True, "test_all_variants": False}],
            "resource_limits": {"min_free_ram_gb": 2},
            "test_settings": test_settings,
        }
    )


SNAPSHOT = SystemSnapshot(total_gb=16, available_gb=8, architecture="x86_64")


class TestPlanRun:
    def test_catalog_source(self, make_client):
        client = make_client(installed=["demo:3b", "demo:70b", "other:1b"])
        plan = plan_run(_config(), client, SNAPSHOT)
        assert plan.source == "catalog"
        assert plan.catalog == ["demo:3b", "demo:70b"]
        assert plan.testable == ["demo:3b"]
        assert [d.model for d in plan.rejected] == ["demo:70b"]

    def test_static_source_is_filtered_too(self, make_client):
        plan = plan_run(_config(), make_client(), SNAPSHOT, StaticSource(["demo:1b", "demo:70b"]))
        assert plan.source == "static"
        assert plan.testable == ["demo:1b"]

    def test_skip_disabled(self, make_client):
        client = make_client(installed=["demo:70b"])
        plan = plan_run(_config(skip_if_insufficient_resources=False), client, SNAPSHOT)
        assert plan.testable == ["demo:70b"]

    def test_listing_failure_propagates(self, make_client):
        client = make_client()
        client.installed_names = MagicMock(side_effect=DaemonUnavailableError("down"))
        with pytest.raises(DaemonUnavailableError):
            plan_run(_config(), client, SNAPSHOT)


class TestRunBenchmark:
    def test_demo_scenario(self, make_client):
        client = make_client(installed=["demo:3b"])
        report = run_benchmark(_config(), client, SNAPSHOT)
        assert report.admitted == ["demo:3b"]
        assert len(client.generate_calls) == 5
        summary = report.summaries[0]
        assert summary.can_run is True
        assert summary.estimated_ram_gb == 3
        assert len(summary.results) == 5
        assert report.ranking[0].model == "demo:3b"
        assert set(report.categories) == {"reasoning", "coding", "math", "creative", "qa"}
        assert report.recommendations.best_overall.model == "demo:3b"

    def test_empty_catalog(self, make_client):
        report = run_benchmark(_config(), make_client(), SNAPSHOT)
        assert report.catalog == []
        assert report.summaries == []
        assert report.recommendations.best_overall is None

    def test_partial_report_after_cancel(self, make_client):
        config = _config()
        client = make_client(installed=["demo:1b", "demo:3b"])
        plan = plan_run(config, client, SNAPSHOT)
        executor = make_executor(config, client)
        executor.run(plan.testable[:1])
        executor.cancel()
        executor.run(plan.testable[1:])
        report = finish_report(config, plan, SNAPSHOT, executor, interrupted=True)
        assert [s.model for s in report.summaries] == ["demo:1b"]
        assert report.interrupted is True
        assert report.to_dict()["interrupted"] is True

    def test_substring_estimator_from_config(self, make_client):
        config = BenchConfig.from_dict(
            {
                "llm_families": [{"name": "qwen2.5"}],
                "resource_limits": {"min_free_ram_gb": 2, "footprint_estimator": "substring"},
            }
        )
        client = make_client(installed=["qwen2.5:32b"])
        plan = plan_run(config, client, SNAPSHOT)
        # "2b" matches first under the substring table.
        assert plan.decisions[0].estimated_gb == 2
        assert plan.testable == ["qwen2.5:32b"]
