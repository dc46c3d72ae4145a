"""Helpers for safe debug logging.

Two things make raw provider traffic unfit for logs: the entity store
key, sent both as an ``apikey`` header and as a bearer token, and OSRM
route geometries, which run to thousands of ``[lng, lat]`` pairs.
:func:`redact_for_log` masks the first and summarizes the second.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from numbers import Real
from typing import Any

_CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        # Supabase / PostgREST
        "apikey",
        "authorization",
        "access_token",
        # Config-style spellings
        "api_key",
        "entities_api_key",
    }
)

_REDACTED = "<redacted>"


def _is_point(value: Any) -> bool:
    return (
        isinstance(value, Sequence)
        and not isinstance(value, str)
        and len(value) == 2
        and all(isinstance(v, Real) and not isinstance(v, bool) for v in value)
    )


def _summarize_points(points: Sequence[Any]) -> list[Any]:
    """Keep the first and last pair of a coordinate list."""
    return [list(points[0]), f"<{len(points) - 2} points>", list(points[-1])]


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 50, _depth: int = 0) -> Any:
    """Return a copy of *value* suitable for debug logs.

    Credential keys are masked (case-insensitive).  Coordinate lists
    longer than *max_items* collapse to their endpoints and a count;
    other long lists are cut at *max_items*.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, Mapping):
        return {
            str(k): _REDACTED
            if str(k).lower() in _CREDENTIAL_KEYS
            else redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
            for k, v in value.items()
        }

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        if len(value) > max_items:
            if all(_is_point(item) for item in value):
                return _summarize_points(value)
            head = [
                redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
                for v in value[:max_items]
            ]
            return [*head, f"<+{len(value) - max_items} items>"]
        return [redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1) for v in value]

    return repr(value)
