"""Terminal output for wallsync.

Command results are rendered as a Rich table, JSON, or bare identifiers
(quiet mode). Pipeline notifications go through a ``NotificationSink`` so
the same upload code can print to the terminal or record for ``-o json``.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

# =============================================================================
# Consoles
# =============================================================================

# Results on stdout, diagnostics on stderr
console = Console()
err_console = Console(stderr=True)


class OutputFormat(Enum):
    """Rendering selected with ``-o``."""

    JSON = "json"
    TABLE = "table"

    @classmethod
    def from_string(cls, value: str) -> OutputFormat:
        return cls(value.lower())


def _label(key: str, labels: dict[str, str]) -> str:
    return labels.get(key) or key.replace("_", " ").title()


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


# =============================================================================
# Renderers
# =============================================================================


def print_table(
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    *,
    title: str | None = None,
    column_labels: dict[str, str] | None = None,
) -> None:
    """Render ``rows`` with one column per key in ``columns``."""
    if not rows:
        console.print("[dim]No results[/dim]")
        return

    labels = column_labels or {}
    table = Table(title=title, header_style="bold")
    for key in columns:
        table.add_column(_label(key, labels))
    for row in rows:
        table.add_row(*(_cell(row.get(key)) for key in columns))

    console.print(table)


def print_key_value(
    data: dict[str, Any],
    *,
    title: str | None = None,
    key_labels: dict[str, str] | None = None,
) -> None:
    """Render a single record as aligned ``label  value`` lines."""
    if title:
        console.print(f"[bold]{title}[/bold]")

    labels = key_labels or {}
    pairs = [(_label(key, labels), value) for key, value in data.items()]
    width = max((len(label) for label, _ in pairs), default=0)

    for label, value in pairs:
        if value is None:
            shown = "[dim]-[/dim]"
        elif isinstance(value, bool):
            shown = "[green]Yes[/green]" if value else "[red]No[/red]"
        elif isinstance(value, (list, dict)):
            shown = json.dumps(value, indent=2)
        else:
            shown = str(value)
        console.print(f"  {label:<{width}}  {shown}")


def print_json(data: Any, *, indent: int = 2) -> None:
    print(json.dumps(data, indent=indent, default=str))


def print_output(
    data: Any,
    *,
    format: OutputFormat = OutputFormat.TABLE,
    columns: Sequence[str] | None = None,
    column_labels: dict[str, str] | None = None,
    title: str | None = None,
    quiet: bool = False,
    id_field: str = "id",
) -> None:
    """Render a command result.

    Args:
        data: A record, a list of records, or a scalar.
        format: Table or JSON.
        columns: Keys shown as table columns.
        column_labels: Header overrides for ``columns``.
        title: Table title.
        quiet: Print only ``id_field`` of each record, one per line.
        id_field: Key printed in quiet mode. Falls back to ``name``.
    """
    if quiet:
        for item in data if isinstance(data, list) else [data]:
            if isinstance(item, dict):
                item = item.get(id_field) or item.get("name") or ""
            print(item)
        return

    if format is OutputFormat.JSON:
        print_json(data)
    elif isinstance(data, dict) and not columns:
        print_key_value(data, title=title, key_labels=column_labels)
    elif isinstance(data, (list, dict)) and columns:
        rows = data if isinstance(data, list) else [data]
        print_table(rows, columns, title=title, column_labels=column_labels)
    else:
        print_json(data)


# =============================================================================
# Status Lines
# =============================================================================


def print_error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_info(message: str) -> None:
    console.print(f"[blue]Info:[/blue] {message}")


# =============================================================================
# Notifications
# =============================================================================


class NotificationLevel(Enum):
    """Toast severity shown to the operator."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str


class NotificationSink(Protocol):
    """Receives pipeline notifications. Never raises back into the caller."""

    def notify(self, level: NotificationLevel, message: str) -> None: ...


class ConsoleNotifier:
    """Prints notifications as status lines as they arrive."""

    def notify(self, level: NotificationLevel, message: str) -> None:
        if level is NotificationLevel.ERROR:
            print_error(message)
        elif level is NotificationLevel.WARNING:
            print_warning(message)
        elif level is NotificationLevel.SUCCESS:
            print_success(message)
        else:
            print_info(message)


class RecordingNotifier:
    """Keeps notifications in memory for JSON output and tests.

    Upload workers notify from their own threads, so access is locked.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.notifications: list[Notification] = []

    def notify(self, level: NotificationLevel, message: str) -> None:
        with self._lock:
            self.notifications.append(Notification(level, message))

    def messages(self, level: NotificationLevel | None = None) -> list[str]:
        """Recorded message texts, optionally only those at ``level``."""
        with self._lock:
            return [n.message for n in self.notifications if level in (None, n.level)]

    def to_list(self) -> list[dict[str, str]]:
        with self._lock:
            return [{"level": n.level.value, "message": n.message} for n in self.notifications]


def create_progress() -> Progress:
    """Overall upload progress bar, drawn on stdout."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    )
