"""Newline-delimited JSON (NDJSON) line codec."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any


def looks_like_json(line: str) -> bool:
    """Return True if the trimmed line starts like a JSON object or array."""
    trimmed = line.strip()
    return trimmed.startswith("{") or trimmed.startswith("[")


def parse_ndjson_line(line: str) -> Any | None:
    """Parse one NDJSON line.

    Returns None for blank lines, lines that do not start with ``{`` or ``[``
    and lines that fail to parse. Deciding whether a failure is an error is
    left to the caller.
    """
    trimmed = line.strip()
    if not trimmed or not looks_like_json(trimmed):
        return None
    try:
        return json.loads(trimmed)
    except ValueError:
        return None


def stringify_ndjson_line(value: Any, compact: bool = True) -> str:
    """Render one JSON value followed by a newline. None renders as ``""``."""
    if value is None:
        return ""
    if compact:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    else:
        text = json.dumps(value, indent=2, ensure_ascii=False)
    return text + "\n"


def parse_ndjson(data: str) -> list[Any]:
    """Parse every JSON line in ``data``, skipping blanks and non-JSON lines."""
    messages = []
    for line in data.split("\n"):
        parsed = parse_ndjson_line(line)
        if parsed is not None:
            messages.append(parsed)
    return messages


def stringify_ndjson(values: Iterable[Any], compact: bool = True) -> str:
    return "".join(stringify_ndjson_line(v, compact) for v in values)
