from __future__ import annotations

from typing import Any


def coerce_string_list(value: Any) -> list[str]:
    """Accept a list or a comma separated string and return trimmed, non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        return []
    output: list[str] = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            output.append(text)
    return output
