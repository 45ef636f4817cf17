"""extract command — scrub a ghdump export into a sentence corpus."""

from __future__ import annotations

import os

import click
from rich.console import Console

from ghcorpus_core.config import excluded_authors_from_config
from ghcorpus_core.pipeline import run_ingestion

console = Console()
err_console = Console(stderr=True)

GHDUMP_HINT = "The file is produced by the ghdump tool (see https://github.com/davidfowl/feedbackflow)."


def validate_input_file(ctx, param, value: str | None) -> str:
    """Click callback: the input must be given and must point at an existing file."""
    if not value or not value.strip():
        raise click.BadParameter(f"GitHub data file is required. {GHDUMP_HINT}")
    if not os.path.isfile(value):
        raise click.BadParameter(f"GitHub data file '{value}' not found!")
    return value


@click.command("extract")
@click.option(
    "--input",
    "-i",
    "input_file",
    required=True,
    callback=validate_input_file,
    help="GitHub data file (JSON array produced by ghdump).",
)
@click.option(
    "--output",
    "-o",
    "output_dir",
    default=None,
    type=click.Path(file_okay=False, dir_okay=True),
    help="Directory where the results will be written. Defaults to the current working directory.",
)
@click.pass_context
def extract_cmd(ctx, input_file: str, output_dir: str | None):
    """Extract scrubbed, deduplicated sentences from GitHub issues and discussions.

    Mentions, links and code are replaced with placeholders, quotes and
    tables are dropped, and content from automation accounts is skipped.
    The result is written to <input name>.csv, one quoted sentence per line,
    sorted case-insensitively.
    """
    config = ctx.obj.get("config", {}) if ctx.obj else {}
    if output_dir is None:
        output_dir = config.get("output_dir")

    result = run_ingestion(
        input_file,
        output_dir=output_dir,
        excluded_authors=excluded_authors_from_config(config),
    )

    if not result.ok:
        err_console.print(result.message, style="red", markup=False, highlight=False, soft_wrap=True)
        ctx.exit(1)

    summary = result.summary
    console.print(
        f"Issues scrubbed: {summary.issues_scrubbed}, comments scrubbed: {summary.comments_scrubbed}",
        highlight=False,
        soft_wrap=True,
    )
    console.print(
        f"Sentences extracted and saved as {result.output_file}", markup=False, highlight=False, soft_wrap=True
    )
