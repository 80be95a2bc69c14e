"""Benchmark executor. Runs the prompt battery against each admitted model.

Per model::

    NotInstalled -> (pull) -> Installed -> Running[1..N] -> Complete | PartialFailure
    NotInstalled -> InstallFailed   (auto-pull disabled, or the pull failed)

Everything is strictly sequential: one model at a time, one request in
flight, so concurrent load on the daemon never skews a measurement. A
failed call becomes a failed :class:`BenchmarkResult` and the next test
case still runs; a failed model never stops the run. Nothing is retried.

Cancellation is cooperative: :meth:`BenchmarkExecutor.cancel` sets a flag
that is checked between test cases and between models. Summaries collected
so far stay available on :attr:`BenchmarkExecutor.summaries`. A
``KeyboardInterrupt`` raised during a request is turned into the same
cancellation, and the interrupted model keeps the results it already has.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Iterable, Optional, Sequence

from .battery import DEFAULT_BATTERY, TestCase
from .config import TestSettings
from .footprint import Estimator, estimate_footprint_gb
from .ollama import OllamaClient, OllamaError
from .ranking import skipped, summarize
from .results import BenchmarkResult, ModelSummary

logger = logging.getLogger(__name__)

SKIP_NOT_INSTALLED = "model not installed"


class ExecutorListener:
    """Progress hooks. All methods are no-ops; override what you need."""

    def on_model_start(self, model: str, index: int, total: int) -> None:
        pass

    def on_pull_start(self, model: str) -> None:
        pass

    def on_test_start(self, model: str, case: TestCase) -> None:
        pass

    def on_test_result(self, model: str, case: TestCase, result: BenchmarkResult) -> None:
        pass

    def on_model_done(self, summary: ModelSummary) -> None:
        pass


# ---------------------------------------------------------------------------
# Metric extraction
# ---------------------------------------------------------------------------


def _as_int(data: dict[str, Any], key: str) -> int:
    value = data.get(key) or 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def extract_metrics(data: dict[str, Any]) -> dict[str, Any]:
    """Throughput and latency figures from an ``/api/generate`` response.

    ``tokens_per_second`` is ``eval_count / eval_duration`` (0 when the
    daemon reports no duration). ``time_to_first_token_ms`` approximates
    TTFT as load time plus prompt evaluation, and is only set when both are
    positive.
    """
    eval_count = _as_int(data, "eval_count")
    eval_ns = _as_int(data, "eval_duration")
    load_ns = _as_int(data, "load_duration")
    prompt_eval_ns = _as_int(data, "prompt_eval_duration")

    tps = eval_count / eval_ns * 1e9 if eval_ns > 0 else 0.0
    ttft = (load_ns + prompt_eval_ns) / 1e6 if load_ns > 0 and prompt_eval_ns > 0 else 0.0
    return {
        "tokens_per_second": tps,
        "time_to_first_token_ms": ttft,
        "prompt_tokens": _as_int(data, "prompt_eval_count"),
        "completion_tokens": eval_count,
    }


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------


class BenchmarkExecutor:
    """Sequentially benchmark a list of models against a fixed battery.

    Parameters
    ----------
    client:
        Daemon client; its base URL decides which daemon is measured.
    settings:
        Only ``auto_pull_models`` is consulted here.
    battery:
        Ordered test cases, shared by every model.
    estimator:
        Footprint estimator used to annotate results and summaries.
    listener:
        Optional progress hooks (the CLI prints from these).
    """

    def __init__(
        self,
        client: OllamaClient,
        settings: Optional[TestSettings] = None,
        battery: Sequence[TestCase] = DEFAULT_BATTERY,
        estimator: Estimator = estimate_footprint_gb,
        listener: Optional[ExecutorListener] = None,
    ) -> None:
        self.client = client
        self.settings = settings or TestSettings()
        self.battery = tuple(battery)
        self.estimator = estimator
        self.listener = listener or ExecutorListener()
        self.summaries: list[ModelSummary] = []
        self._cancel = threading.Event()

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def run(self, models: Iterable[str]) -> list[ModelSummary]:
        """Benchmark each model in order and return all summaries."""
        models = list(models)
        for index, model in enumerate(models, start=1):
            if self.cancelled:
                logger.info("Run cancelled before %s", model)
                break
            self.listener.on_model_start(model, index, len(models))
            summary = self.run_model(model)
            self.summaries.append(summary)
            self.listener.on_model_done(summary)
        return list(self.summaries)

    def run_model(self, model: str) -> ModelSummary:
        estimated = self.estimator(model)

        reason = self._ensure_installed(model)
        if reason is not None:
            logger.info("Skipping %s: %s", model, reason)
            return skipped(model, reason, estimated)

        results: list[BenchmarkResult] = []
        cancelled = False
        for case in self.battery:
            if self.cancelled:
                cancelled = True
                break
            self.listener.on_test_start(model, case)
            try:
                result = self.run_test(model, case, estimated)
            except KeyboardInterrupt:
                # Ctrl-C during a request: keep what this model already has.
                logger.info("Interrupted during %s / %s", model, case.name)
                self.cancel()
                cancelled = True
                break
            results.append(result)
            self.listener.on_test_result(model, case, result)
        return summarize(model, results, estimated, cancelled=cancelled)

    def run_test(
        self, model: str, case: TestCase, estimated_gb: Optional[int] = None
    ) -> BenchmarkResult:
        """One generation call; never raises for daemon-side failures."""
        if estimated_gb is None:
            estimated_gb = self.estimator(model)

        start = time.monotonic()
        try:
            data = self.client.generate(model, case.prompt)
        except OllamaError as exc:
            logger.debug("%s / %s failed: %s", model, case.name, exc)
            return BenchmarkResult(
                model=model,
                test_name=case.name,
                category=case.category,
                success=False,
                error=str(exc),
                estimated_ram_gb=float(estimated_gb),
            )
        elapsed_ms = (time.monotonic() - start) * 1000

        return BenchmarkResult(
            model=model,
            test_name=case.name,
            category=case.category,
            success=True,
            total_time_ms=elapsed_ms,
            response=str(data.get("response") or ""),
            estimated_ram_gb=float(estimated_gb),
            **extract_metrics(data),
        )

    def _ensure_installed(self, model: str) -> Optional[str]:
        """Return a skip reason, or None once the model is installed."""
        try:
            if self.client.is_installed(model):
                return None
        except OllamaError as exc:
            return f"installation check failed: {exc}"

        if not self.settings.auto_pull_models:
            return SKIP_NOT_INSTALLED

        self.listener.on_pull_start(model)
        try:
            self.client.pull(model)
        except OllamaError as exc:
            return f"failed to pull model: {exc}"
        return None
