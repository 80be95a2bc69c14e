"""End-to-end run: source -> admission -> executor -> report.

Each stage runs to completion before the next starts and only hands its
output downward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .admission import AdmissionDecision, evaluate_admission
from .config import BenchConfig
from .executor import BenchmarkExecutor, ExecutorListener
from .footprint import get_estimator
from .hardware import SystemSnapshot
from .ollama import OllamaClient
from .ranking import BenchmarkReport, build_report
from .sources import CatalogSource, ModelSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunPlan:
    """Candidates and their admission decisions, before anything is benchmarked."""

    source: str
    catalog: list[str]
    decisions: list[AdmissionDecision]

    @property
    def testable(self) -> list[str]:
        return [d.model for d in self.decisions if d.admitted]

    @property
    def rejected(self) -> list[AdmissionDecision]:
        return [d for d in self.decisions if not d.admitted]


def plan_run(
    config: BenchConfig,
    client: OllamaClient,
    snapshot: SystemSnapshot,
    source: Optional[ModelSource] = None,
) -> RunPlan:
    """Discover candidates and decide which of them fit in memory.

    Raises
    ------
    DaemonUnavailableError
        If the catalog source cannot list the installed models.
    """
    source = source or CatalogSource(config.families)
    catalog = source.models(client)
    decisions = evaluate_admission(
        catalog,
        snapshot,
        config.limits,
        skip_if_insufficient=config.settings.skip_if_insufficient_resources,
        estimator=get_estimator(config.limits.footprint_estimator),
    )
    plan = RunPlan(source=source.name, catalog=catalog, decisions=decisions)
    logger.info(
        "%d candidate(s) from %s source, %d admitted",
        len(catalog),
        source.name,
        len(plan.testable),
    )
    return plan


def make_executor(
    config: BenchConfig,
    client: OllamaClient,
    listener: Optional[ExecutorListener] = None,
) -> BenchmarkExecutor:
    return BenchmarkExecutor(
        client,
        settings=config.settings,
        estimator=get_estimator(config.limits.footprint_estimator),
        listener=listener,
    )


def finish_report(
    config: BenchConfig,
    plan: RunPlan,
    snapshot: SystemSnapshot,
    executor: BenchmarkExecutor,
    interrupted: bool = False,
) -> BenchmarkReport:
    """Build the report from whatever the executor has collected so far."""
    return build_report(
        snapshot,
        plan.decisions,
        list(executor.summaries),
        estimator=get_estimator(config.limits.footprint_estimator),
        interrupted=interrupted,
        catalog=plan.catalog,
    )


def run_benchmark(
    config: BenchConfig,
    client: OllamaClient,
    snapshot: SystemSnapshot,
    source: Optional[ModelSource] = None,
    listener: Optional[ExecutorListener] = None,
) -> BenchmarkReport:
    """Plan, execute and rank in one call."""
    plan = plan_run(config, client, snapshot, source)
    executor = make_executor(config, client, listener)
    executor.run(plan.testable)
    return finish_report(config, plan, snapshot, executor)
