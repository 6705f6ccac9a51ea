"""Main CLI entry point for wallsync."""

from __future__ import annotations

import click

from wallsync import __version__
from wallsync.cli.config_cmd import config
from wallsync.cli.delete import delete
from wallsync.cli.destinations import destinations
from wallsync.cli.name import name
from wallsync.cli.thumbs import thumbs
from wallsync.cli.upload import upload

# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="wallsync")
def cli() -> None:
    """wallsync - batch image uploads for a wallpaper admin backend.

    Validates, de-duplicates and uploads wallpapers through a presign relay,
    then checks that CDN previews load.

    Get started:

      wallsync config init          # Create config file

      wallsync destinations         # See where categories upload to

      wallsync upload ./images --category "AMOLED & Dark"

    Use --help on any command for more information.
    """
    pass


# =============================================================================
# Register Commands
# =============================================================================

cli.add_command(config)
cli.add_command(upload)
cli.add_command(destinations)
cli.add_command(thumbs)
cli.add_command(name)
cli.add_command(delete)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
