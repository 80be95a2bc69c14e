"""ollabench run -- benchmark every admitted model and rank them."""

from __future__ import annotations

import json
from typing import Optional

import click

from ollabench.cli_helpers import EchoListener, fail, open_client, require_daemon, resolve_config
from ollabench.executor import ExecutorListener
from ollabench.hardware import detect_snapshot
from ollabench.ollama import DaemonUnavailableError
from ollabench.pipeline import finish_report, make_executor, plan_run
from ollabench.report import render_admission, render_report, render_system
from ollabench.sources import CatalogSource, ModelSource, StaticSource


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to config.json (default: ./config.json if present).",
)
@click.option(
    "--model",
    "-m",
    "models",
    multiple=True,
    help="Benchmark these models instead of the catalog (repeatable).",
)
@click.option("--base-url", default=None, help="Ollama base URL (default: $OLLAMA_HOST or localhost:11434).")
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
@click.option(
    "--auto-pull/--no-auto-pull",
    default=None,
    help="Pull models that are not installed (overrides the config file).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
def run(
    config_path: Optional[str],
    models: tuple[str, ...],
    base_url: Optional[str],
    timeout: Optional[float],
    auto_pull: Optional[bool],
    as_json: bool,
) -> None:
    """Discover, filter and benchmark model variants on the local Ollama daemon.

    Every admitted model runs the same five prompts (reasoning, coding, math,
    creative, QA) one at a time. Results are ranked by average tokens/sec.

    \b
        ollabench run
        ollabench run --config bench.json --auto-pull
        ollabench run -m llama3.2:1b -m qwen2.5:0.5b --json

    Press Ctrl-C to stop early; results collected so far are still reported.
    """
    if timeout is not None and timeout <= 0:
        fail("--timeout must be positive")
    config = resolve_config(config_path).with_overrides(
        base_url=base_url,
        request_timeout_s=timeout,
        auto_pull_models=auto_pull,
    )

    snapshot = detect_snapshot()
    quiet = as_json
    if not quiet:
        click.echo("=== Ollama Model Benchmark ===\n")
        click.echo("\n".join(render_system(snapshot)))

    with open_client(config) as client:
        require_daemon(client)

        source: ModelSource = StaticSource(models) if models else CatalogSource(config.families)
        try:
            plan = plan_run(config, client, snapshot, source)
        except DaemonUnavailableError as exc:
            fail(str(exc))

        if not plan.catalog:
            if as_json:
                empty = finish_report(config, plan, snapshot, make_executor(config, client))
                click.echo(json.dumps(empty.to_dict(), indent=2))
            else:
                click.echo("No models found to test. Please check your config file.")
            return
        if not quiet:
            click.echo("")
            click.echo("\n".join(render_admission(plan.catalog, plan.decisions)))

        listener: ExecutorListener = ExecutorListener() if quiet else EchoListener()
        executor = make_executor(config, client, listener)
        interrupted = False
        try:
            executor.run(plan.testable)
        except KeyboardInterrupt:
            executor.cancel()
            interrupted = True
        if executor.cancelled:
            interrupted = True
            click.echo("\nInterrupted; reporting results collected so far.", err=True)

    report = finish_report(config, plan, snapshot, executor, interrupted=interrupted)
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        click.echo("\n")
        click.echo(render_report(report, include_preamble=False))


def register(cli: click.Group) -> None:
    """Register the run command with the CLI group."""
    cli.add_command(run)
