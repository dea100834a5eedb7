"""CLI subcommand: query."""

from __future__ import annotations

import sqlite3
from typing import Iterator

import click

from resultfmt.cli.output import output_options, parse_psets, render, setup_logging
from resultfmt.model.resultset import CursorResultSet


@click.command("query")
@click.argument("database", type=click.Path())
@click.argument("statements", nargs=-1, required=True)
@output_options
def query_cmd(
    database: str,
    statements: tuple[str, ...],
    psets: tuple[str, ...],
    crosstab: str | None,
    count: int,
    verbose: bool,
) -> None:
    """Run SQL statements against a SQLite database and render their results.

    Each statement that returns rows is rendered as one result set.
    """
    setup_logging(verbose)
    opts = parse_psets(psets)
    conn = sqlite3.connect(database)
    try:
        with click.open_file("-", "wb") as out:
            render(out, _execute_all(conn, statements), opts, crosstab=crosstab, count=count)
    except sqlite3.Error as e:
        raise click.ClickException(str(e))
    finally:
        conn.close()


def _execute_all(conn: sqlite3.Connection, statements: tuple[str, ...]) -> Iterator[CursorResultSet]:
    for sql in statements:
        try:
            cursor = conn.execute(sql)
        except sqlite3.Error as e:
            raise click.ClickException(f"{sql}: {e}")
        if cursor.description is None:
            conn.commit()
            continue
        yield CursorResultSet(cursor)
