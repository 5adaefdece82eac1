"""Helpers shared by the service command modules."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional


def split_list(value: Any) -> List[str]:
    """Split a comma-separated option value (``a,b, c``) into items.

    Raises:
        ValueError: If the option was given without a value
    """
    if not isinstance(value, str):
        raise ValueError("Expected a comma-separated list of values")
    return [item.strip() for item in value.split(',') if item.strip()]


def tag_value(tags: Optional[Iterable[Dict[str, str]]], key: str = "Name") -> str:
    """Value of tag ``key`` in an EC2-style tag list, ``-`` when absent."""
    for tag in tags or ():
        if tag.get("Key") == key:
            return tag.get("Value", "-")
    return "-"


def or_dash(value: Any) -> str:
    """Render ``value`` as text, ``-`` for None/empty."""
    if value is None or value == "":
        return "-"
    return str(value)


def parse_int(value: Any, option: str) -> int:
    """Convert a numeric option value such as ``--duration-seconds 900``.

    Raises:
        ValueError: If the option was given without a value or is not a number
    """
    if not isinstance(value, str):
        raise ValueError(f"--{option} expects a number")
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"--{option} expects a number, got: {value}") from e
