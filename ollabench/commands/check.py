"""ollabench check -- hardware profile and reference-model compatibility."""

from __future__ import annotations

from typing import Optional

import click

from ollabench.admission import evaluate_admission
from ollabench.catalog import all_reference_variants
from ollabench.cli_helpers import resolve_config
from ollabench.footprint import get_estimator
from ollabench.hardware import detect_hardware
from ollabench.report import render_compatibility


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to config.json (default: ./config.json if present).",
)
def check(config_path: Optional[str]) -> None:
    """Check which well-known model variants fit on this machine.

    Does not contact the Ollama daemon.
    """
    config = resolve_config(config_path)
    profile = detect_hardware()
    decisions = evaluate_admission(
        all_reference_variants(),
        profile.snapshot,
        config.limits,
        skip_if_insufficient=True,
        estimator=get_estimator(config.limits.footprint_estimator),
    )
    click.echo("=== LLM Compatibility Check ===\n")
    click.echo(render_compatibility(profile, decisions, config.limits.min_free_ram_gb))


def register(cli: click.Group) -> None:
    """Register the check command with the CLI group."""
    cli.add_command(check)
