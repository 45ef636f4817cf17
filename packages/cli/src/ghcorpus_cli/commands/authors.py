"""authors command — tally who wrote the issues and comments in an export."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ghcorpus_cli.commands.extract import validate_input_file

console = Console()


@click.command("authors")
@click.option(
    "--input",
    "-i",
    "input_file",
    required=True,
    callback=validate_input_file,
    help="GitHub data file (JSON array produced by ghdump).",
)
@click.option("--top", default=20, show_default=True, help="Number of most active authors to show.")
@click.option(
    "--include-excluded",
    is_flag=True,
    help="Also count authors in the excluded set (automation accounts).",
)
@click.option(
    "--output",
    "output_file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write every distinct author, one per line, to this file.",
)
@click.pass_context
def authors_cmd(ctx, input_file: str, top: int, include_excluded: bool, output_file: str | None):
    """Show the most active authors in a GitHub data file.

    Bots usually top the list — add any you find to `extra_excluded_authors`
    in .ghcorpus.yml so `extract` skips their content.
    """
    from ghcorpus_core.authors import sorted_authors, tally_authors
    from ghcorpus_core.config import excluded_authors_from_config
    from ghcorpus_core.errors import MalformedInputError
    from ghcorpus_core.reader import iter_issues

    config = ctx.obj.get("config", {}) if ctx.obj else {}
    excluded = () if include_excluded else excluded_authors_from_config(config)

    try:
        with open(input_file, encoding="utf-8") as f:
            counts = tally_authors(iter_issues(f), excluded_authors=excluded)
    except (MalformedInputError, UnicodeDecodeError) as e:
        raise click.ClickException(f"{input_file} is not a valid GitHub data file ({e}).")

    if not counts:
        console.print("[yellow]No authors found.[/yellow]")
        return

    console.print(f"\n[bold]{len(counts)}[/bold] distinct authors, {sum(counts.values())} records")

    table = Table(title=f"Top {top} Authors", show_header=True, header_style="bold cyan")
    table.add_column("Author")
    table.add_column("Records", justify="right")
    for name, count in counts.most_common(top):
        table.add_row(escape(name), str(count))
    console.print(table)

    if output_file:
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                for name in sorted_authors(counts):
                    f.write(name + "\n")
        except OSError as e:
            raise click.ClickException(f"Could not write {output_file}: {e.strerror or e}")
        console.print(f"Authors saved as {output_file}", markup=False, highlight=False, soft_wrap=True)
