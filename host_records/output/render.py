"""Output rendering for extracted records."""

import json
from io import StringIO
from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich import box

from host_records.models import AppMetadataRow, CredentialPair

# Columns shown in the terminal table; JSON output always carries every field
APP_TABLE_COLUMNS = [
    "name",
    "bundle_identifier",
    "bundle_short_version",
    "minimum_system_version",
    "path",
]


def render_json(rows: Iterable[AppMetadataRow | CredentialPair]) -> str:
    """
    Render records as a JSON array.

    Field order follows the record schema rather than being sorted, so
    columns line up with the table layout consumers expect.
    """
    return json.dumps([row.as_row() for row in rows], indent=2)


def render_table(
    title: str,
    rows: list[dict[str, str]],
    columns: list[str] | None = None
) -> str:
    """
    Render row dictionaries as a Rich table.

    Args:
        title: Table title
        rows: Ordered field-name to value mappings
        columns: Fields to show (default: every field of the first row)

    Returns:
        Formatted string suitable for terminal display
    """
    output_buffer = StringIO()
    console = Console(file=output_buffer, width=160, force_terminal=True)

    if not rows:
        console.print(f"[dim]{escape(title)}: no records[/dim]")
        return output_buffer.getvalue()

    columns = columns or list(rows[0].keys())

    table = Table(
        title=f"[bold cyan]{escape(title)}[/bold cyan] [dim]({len(rows)})[/dim]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold"
    )
    for column in columns:
        table.add_column(column, overflow="fold")

    for row in rows:
        table.add_row(*(Text(row.get(column, "")) for column in columns))

    console.print(table)
    return output_buffer.getvalue()


def render_apps(rows: list[AppMetadataRow]) -> str:
    return render_table("Applications", [row.as_row() for row in rows], APP_TABLE_COLUMNS)


def render_credentials(found: list[tuple[str, tuple[CredentialPair, ...]]]) -> str:
    """Render credential pairs grouped by the file they came from."""
    parts = []
    for path, pairs in found:
        parts.append(render_table(path, [pair.as_row() for pair in pairs], ["username", "password"]))
    if not parts:
        return render_table("Tomcat users", [])
    return "".join(parts)


def render_credentials_json(found: list[tuple[str, tuple[CredentialPair, ...]]]) -> str:
    return json.dumps(
        [{"path": path, "users": [pair.as_row() for pair in pairs]} for path, pairs in found],
        indent=2
    )
