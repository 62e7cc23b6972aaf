"""Output formatters for mpadmin commands.

Commands print one of two shapes:
- rows: a list of ``{"id", "name"}`` items (organizations, timezones)
- a record: a single flat dict (a project, a timezone check)

Values come from the server and are never interpreted as Rich markup.
"""

from __future__ import annotations

import json
from typing import Any

from rich.table import Table
from rich.text import Text

Record = dict[str, Any]

ROW_COLUMNS = ("id", "name")


def format_json(data: Record | list[Record]) -> str:
    """Format rows or a record as pretty-printed JSON.

    Non-ASCII names (e.g. "Europe/Zürich") are kept as-is.
    """
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_table(data: Record | list[Record]) -> Table:
    """Format rows as an ID/NAME table, or a record as FIELD/VALUE pairs."""
    if isinstance(data, dict):
        return _record_table(data)
    return _rows_table(data)


def _rows_table(rows: list[Record]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("NAME")
    for row in rows:
        table.add_row(*(Text(_cell(row.get(col))) for col in ROW_COLUMNS))
    return table


def _record_table(record: Record) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("FIELD")
    table.add_column("VALUE")
    for key, value in record.items():
        table.add_row(Text(key), Text(_cell(value)))
    return table


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def format_plain(data: Record | list[Record]) -> str:
    """Format rows as one name per line, or a record as key=value lines."""
    if isinstance(data, dict):
        return "\n".join(f"{key}={value}" for key, value in data.items())
    return "\n".join(str(row.get("name", row.get("id", ""))) for row in data)
