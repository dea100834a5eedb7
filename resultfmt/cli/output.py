"""Options and rendering shared by the CLI subcommands."""

from __future__ import annotations

import logging
import sys
from typing import BinaryIO, Callable, Iterable

import click

from resultfmt.encode.table import TableEncoder
from resultfmt.errors import Error, InvalidColumnParams
from resultfmt.model.resultset import ResultSet
from resultfmt.options import from_map
from resultfmt.view.crosstab import new_crosstab_view


def output_options(f: Callable) -> Callable:
    """Add the output options shared by every subcommand."""
    f = click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output to stderr.")(f)
    f = click.option(
        "--count",
        type=click.IntRange(min=0),
        default=0,
        help="Rows to buffer when computing column widths (0 buffers all rows).",
    )(f)
    f = click.option(
        "--crosstab",
        default=None,
        help='Pivot each result set: --crosstab "vertical horizontal [data [sort]]".',
    )(f)
    f = click.option(
        "-P",
        "--pset",
        "psets",
        multiple=True,
        help="Set a printing option: -P name=value (e.g. -P border=2).",
    )(f)
    return f


def parse_psets(psets: tuple[str, ...]) -> dict[str, str]:
    """Parse name=value pairs into the option map; format defaults to aligned."""
    opts = {"format": "aligned"}
    for pset in psets:
        if "=" not in pset:
            raise click.ClickException(f"Invalid --pset format: {pset!r} (expected name=value)")
        name, value = pset.split("=", 1)
        opts[name.strip()] = value.strip()
    return opts


def parse_crosstab(params: str | None) -> list[str] | None:
    """Split the crosstab parameters: vertical, horizontal, data and sort."""
    if params is None:
        return None
    fields = params.split()
    if len(fields) > 4:
        raise InvalidColumnParams()
    return fields


def setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)


def render(
    w: BinaryIO,
    result_sets: Iterable[ResultSet],
    opts: dict[str, str],
    *,
    crosstab: str | None = None,
    count: int = 0,
) -> None:
    """Render each result set, separated the way Encoder.encode_all separates them."""
    try:
        params = parse_crosstab(crosstab)
        enc = None
        for i, rs in enumerate(result_sets):
            if params is not None:
                rs = new_crosstab_view(rs, *params)
            builder, kwargs = from_map(opts)
            if count and isinstance(builder, type) and issubclass(builder, TableEncoder):
                kwargs["count"] = count
            enc = builder(rs, **kwargs)
            if i != 0:
                w.write(enc.separator())
            try:
                enc.encode(w)
            finally:
                rs.close()
        if enc is not None:
            w.write(enc.trailer())
    except Error as e:
        raise click.ClickException(str(e))
    finally:
        w.flush()
