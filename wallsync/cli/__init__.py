"""CLI commands for wallsync."""

from wallsync.cli.main import cli, main

__all__ = ["cli", "main"]
