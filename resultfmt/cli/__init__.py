"""CLI entry point for resultfmt."""

import click

from resultfmt.cli.query_cmd import query_cmd
from resultfmt.cli.render_cmd import render_cmd


@click.group()
def main() -> None:
    """Render query results as psql style tables."""


main.add_command(render_cmd)
main.add_command(query_cmd)
