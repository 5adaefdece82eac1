"""Plain-text renderers for command output."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Optional, Sequence

MAX_LISTING_WIDTH = 100
ELLIPSIS = "..."
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

Row = Sequence[Optional[str]]


def to_table(rows: Sequence[Row]) -> str:
    """Render rows as a fixed-width table.

    The first row is the header and is followed by a rule line of dashes.
    Columns are separated by two spaces and sized to their widest cell.

    Args:
        rows: Header row followed by data rows

    Returns:
        Rendered table, or an empty string for no rows
    """
    if not rows:
        return ""

    cols = len(rows[0])
    widths = [0] * cols
    for row in rows:
        for i, cell in enumerate(row[:cols]):
            if cell is not None:
                widths[i] = max(widths[i], len(cell))

    lines = []
    for index, row in enumerate(rows):
        cells = []
        for i in range(cols):
            value = row[i] if i < len(row) and row[i] is not None else ""
            cells.append(value.ljust(widths[i]))
        lines.append("  ".join(cells))
        if index == 0:
            lines.append("  ".join("-" * width for width in widths))

    return "\n".join(lines) + "\n"


def to_key_value(pairs: Sequence[Row]) -> str:
    """Render ``(key, value)`` pairs flush-left with a `` : `` separator.

    Args:
        pairs: Key/value pairs; entries with fewer than two items are skipped

    Returns:
        Rendered pairs, or an empty string for no pairs
    """
    if not pairs:
        return ""

    key_width = max((len(pair[0]) for pair in pairs if pair and pair[0] is not None), default=0)

    lines = []
    for pair in pairs:
        if len(pair) < 2:
            continue
        key = pair[0] if pair[0] is not None else ""
        value = pair[1] if pair[1] is not None else ""
        lines.append(f"{key.ljust(key_width)} : {value}\n")

    return "".join(lines)


def truncate(value: str, limit: int = MAX_LISTING_WIDTH) -> str:
    """Shorten ``value`` to ``limit`` characters, ending with an ellipsis."""
    if len(value) <= limit:
        return value
    return value[:limit - len(ELLIPSIS)] + ELLIPSIS


def format_size(num_bytes: int) -> str:
    """Human readable size using binary units (e.g. ``1.5 KiB``)."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    size = float(num_bytes)
    exp = 0
    while size >= 1024 and exp < 6:
        size /= 1024
        exp += 1
    return f"{size:.1f} {'KMGTPE'[exp - 1]}iB"


def format_timestamp(value: Optional[datetime]) -> str:
    """Format a timestamp in local time, ``-`` when missing."""
    if value is None:
        return "-"
    return value.astimezone().strftime(TIMESTAMP_FORMAT)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return str(obj)


def to_json(obj: Any) -> str:
    """Render ``obj`` as indented JSON."""
    return json.dumps(obj, indent=2, default=_json_default)
