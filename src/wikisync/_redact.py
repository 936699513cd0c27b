"""Helpers for compact debug logging.

Submission payloads can carry thousands of varbit/varp entries. This module
shrinks such payloads to something readable before emitting DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def summarize_for_log(
    value: Any,
    *,
    max_entries: int = 8,
    max_string: int = 256,
    _depth: int = 0,
) -> Any:
    """Return a copy of *value* with large containers reduced to a size marker."""
    if _depth > 10:
        return "<max-depth>"

    if value is None or isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        if len(value) > max_entries:
            return f"<{len(value)} entries>"
        return {
            str(k): summarize_for_log(v, max_entries=max_entries, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        if len(value) > max_entries:
            return f"<{len(value)} items>"
        return [summarize_for_log(v, max_entries=max_entries, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
