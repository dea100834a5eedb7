"""CLI subcommand: render."""

from __future__ import annotations

from typing import Iterator

import click

from resultfmt.cli.output import output_options, parse_psets, render, setup_logging
from resultfmt.data.loader import LoadError, load_csv
from resultfmt.model.resultset import MemoryResultSet


@click.command("render")
@click.argument("files", nargs=-1, type=click.Path())
@output_options
def render_cmd(
    files: tuple[str, ...],
    psets: tuple[str, ...],
    crosstab: str | None,
    count: int,
    verbose: bool,
) -> None:
    """Render CSV files as result sets.

    Each file is one result set; its first row holds the column names.
    Use - to read from stdin, which is also read when no file is given.
    """
    setup_logging(verbose)
    opts = parse_psets(psets)
    with click.open_file("-", "wb") as out:
        render(out, _load_all(files or ("-",)), opts, crosstab=crosstab, count=count)


def _load_all(files: tuple[str, ...]) -> Iterator[MemoryResultSet]:
    for filepath in files:
        if filepath == "-":
            yield _load_stdin()
        else:
            yield _load_file(filepath)


def _load_file(filepath: str) -> MemoryResultSet:
    """Load a CSV file as a result set."""
    try:
        with open(filepath, newline="") as f:
            return load_csv(f)
    except OSError as e:
        raise click.ClickException(f"Cannot read {filepath}: {e}")
    except LoadError as e:
        raise click.ClickException(f"{filepath}: {e}")


def _load_stdin() -> MemoryResultSet:
    """Load CSV data from stdin as a result set."""
    try:
        with click.open_file("-") as f:
            return load_csv(f)
    except LoadError as e:
        raise click.ClickException(f"stdin: {e}")
