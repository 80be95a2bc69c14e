"""
ollabench command-line interface.

Usage::

    ollabench run
    ollabench run --config bench.json --auto-pull
    ollabench run -m llama3.2:1b -m gemma2:2b --json
    ollabench catalog
    ollabench check
"""

from __future__ import annotations

import logging

import click

from ollabench import __version__


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="ollabench")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """ollabench — benchmark local Ollama models and find what fits your hardware."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


# ---------------------------------------------------------------------------
# Register command modules
# ---------------------------------------------------------------------------

from ollabench.commands import catalog, check, run  # noqa: E402

for _mod in [run, catalog, check]:
    _mod.register(main)
