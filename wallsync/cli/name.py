"""Name suggestion command for wallsync."""

from __future__ import annotations

import click

from wallsync.cli.common import Context, global_options, handle_errors
from wallsync.core.output import print_output
from wallsync.services.naming import extract_wallpaper_name, suggest_name


@click.command("name")
@click.argument("files", nargs=-1, required=True)
@global_options
@handle_errors
def name(ctx: Context, files: tuple[str, ...]) -> None:
    """Suggest catalog names for file names or object URLs.

    Example:
        wallsync name iphone-16-pro-max-dark.jpg mountain-lake-2160x3840.png
    """
    rows = []
    for item in files:
        suggestion = suggest_name(item)
        rows.append(
            {
                "file": item,
                "display_name": extract_wallpaper_name(item),
                **suggestion.to_dict(),
            }
        )

    print_output(
        rows,
        format=ctx.output_format,
        columns=["file", "display_name", "suggested_name", "category", "confidence", "themes"],
        title="Names",
        quiet=ctx.quiet,
        id_field="suggested_name",
    )
