"""Delete command for wallsync."""

from __future__ import annotations

import click

from wallsync.cli.common import Context, global_options, handle_errors
from wallsync.core.output import OutputFormat, print_json, print_success


@click.command("delete")
@click.argument("key")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@global_options
@handle_errors
def delete(ctx: Context, key: str, yes: bool) -> None:
    """Delete one object from the bucket by key.

    Example:
        wallsync delete wallpapers/amoled-and-dark/old.jpg --yes
    """
    client = ctx.get_delete_client()

    if not yes:
        click.confirm(f"Delete '{key}'?", abort=True)

    with client:
        client.delete(key)

    if ctx.output_format == OutputFormat.JSON:
        print_json({"key": key, "deleted": True})
    elif not ctx.quiet:
        print_success(f"Deleted {key}")
