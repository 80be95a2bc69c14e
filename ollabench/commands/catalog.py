"""ollabench catalog -- list candidate variants and their admission decisions."""

from __future__ import annotations

from typing import Optional

import click

from ollabench.cli_helpers import fail, open_client, require_daemon, resolve_config
from ollabench.hardware import detect_snapshot
from ollabench.ollama import DaemonUnavailableError
from ollabench.pipeline import plan_run
from ollabench.report import render_admission, render_system


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to config.json (default: ./config.json if present).",
)
@click.option("--base-url", default=None, help="Ollama base URL.")
def catalog(config_path: Optional[str], base_url: Optional[str]) -> None:
    """Show which variants would be benchmarked, without running anything.

    Lists every discovered variant with its estimated memory footprint and
    whether it fits on this machine.
    """
    config = resolve_config(config_path).with_overrides(base_url=base_url)
    snapshot = detect_snapshot()

    with open_client(config) as client:
        require_daemon(client)
        try:
            plan = plan_run(config, client, snapshot)
        except DaemonUnavailableError as exc:
            fail(str(exc))

    click.echo("\n".join(render_system(snapshot)))
    click.echo("")
    if not plan.catalog:
        click.echo("No models found to test. Please check your config file.")
        return
    click.echo("\n".join(render_admission(plan.catalog, plan.decisions)))


def register(cli: click.Group) -> None:
    """Register the catalog command with the CLI group."""
    cli.add_command(catalog)
