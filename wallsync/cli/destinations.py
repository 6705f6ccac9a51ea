"""Destination table command for wallsync."""

from __future__ import annotations

from typing import Optional

import click

from wallsync.cli.common import Context, global_options, handle_errors
from wallsync.core.output import print_output, print_success
from wallsync.uploaders.destinations import list_destinations, resolve_destination


@click.command("destinations")
@click.option("--category", help="Resolve one category instead of listing")
@click.option("--subcategory", help="Subcategory or device series to append")
@global_options
@handle_errors
def destinations(ctx: Context, category: Optional[str], subcategory: Optional[str]) -> None:
    """List categories and the bucket directories they upload to.

    Example:
        wallsync destinations
        wallsync destinations --category "Minimal & Aesthetic" --subcategory Gradient
    """
    if category or subcategory:
        directory = resolve_destination(category, subcategory)
        if ctx.quiet:
            click.echo(directory)
        else:
            print_success(directory)
        return

    rows = [
        {
            "category": d.category,
            "kind": d.kind,
            "directory": d.directory,
            "subcategories": ", ".join(d.subcategories),
        }
        for d in list_destinations()
    ]
    print_output(
        rows,
        format=ctx.output_format,
        columns=["category", "kind", "directory", "subcategories"],
        title="Destinations",
        quiet=ctx.quiet,
        id_field="directory",
    )
