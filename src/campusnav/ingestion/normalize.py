"""Normalization helpers.

Centralizes defensive parsing of provider payloads and search input.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def normalize_query(value: str | None) -> str:
    """Trim and case-fold a search query."""
    if value is None:
        return ""
    return value.strip().casefold()
