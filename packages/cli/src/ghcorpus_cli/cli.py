"""CLI entry point for ghcorpus.

Commands:
  extract  — scrub a ghdump export into a deduplicated sentence corpus
  authors  — tally who wrote the issues and comments in an export
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from ghcorpus_cli.commands.authors import authors_cmd
from ghcorpus_cli.commands.extract import extract_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("ghcorpus"),
    prog_name="ghcorpus",
)
@click.option(
    "--config",
    "config_path",
    default=".ghcorpus.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="GHCORPUS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress details to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Build a scrubbed sentence corpus from GitHub issues and discussions."""
    from ghcorpus_core.config import load_config

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)


main.add_command(extract_cmd)
main.add_command(authors_cmd)
