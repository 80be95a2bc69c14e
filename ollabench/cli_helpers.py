"""Shared helpers for CLI commands.

Kept out of cli.py so command modules can share config loading, daemon
checks and progress output without circular imports.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from ollabench.battery import TestCase
from ollabench.config import DEFAULT_CONFIG_FILE, BenchConfig, ConfigError, load_config
from ollabench.executor import ExecutorListener
from ollabench.ollama import OllamaClient
from ollabench.results import BenchmarkResult, ModelSummary

_logger = logging.getLogger(__name__)


def fail(message: str) -> NoReturn:
    """Print a fatal setup error and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def resolve_config(path: Optional[str]) -> BenchConfig:
    """Load the config file, or defaults when none was given and none exists.

    An explicitly given path that cannot be read is fatal.
    """
    try:
        if path is None:
            default = Path(DEFAULT_CONFIG_FILE)
            if not default.exists():
                _logger.debug("No %s found, using built-in defaults", default)
                return BenchConfig()
            path = str(default)
        return load_config(path)
    except ConfigError as exc:
        fail(str(exc))


def open_client(config: BenchConfig) -> OllamaClient:
    return OllamaClient(
        base_url=config.daemon.base_url,
        request_timeout=config.daemon.request_timeout_s,
        pull_timeout=config.daemon.pull_timeout_s,
    )


def require_daemon(client: OllamaClient) -> None:
    if not client.is_running():
        fail(
            f"Ollama is not running at {client.base_url}. "
            "Please start Ollama first (run: ollama serve)."
        )


class EchoListener(ExecutorListener):
    """Prints executor progress as it happens."""

    def on_model_start(self, model: str, index: int, total: int) -> None:
        click.echo(f"\n=== Testing Model: {model} ({index}/{total}) ===")

    def on_pull_start(self, model: str) -> None:
        click.echo(f"Model {model} not installed. Pulling model...")

    def on_test_start(self, model: str, case: TestCase) -> None:
        click.echo(f"\n  Running test: {case.name} ({case.category})")

    def on_test_result(self, model: str, case: TestCase, result: BenchmarkResult) -> None:
        if result.success:
            click.echo(
                f"    ✓ Tokens/sec: {result.tokens_per_second:.2f} | "
                f"Total time: {result.total_time_ms:.2f}ms | "
                f"Tokens: {result.completion_tokens} | "
                f"RAM: ~{result.estimated_ram_gb:.0f} GB"
            )
        else:
            click.echo(f"    ✗ Error: {result.error}")

    def on_model_done(self, summary: ModelSummary) -> None:
        if summary.skip_reason is not None:
            click.echo(f"Skipping {summary.model}: {summary.skip_reason}")
