"""Deterministic position arbitration policy.

This module intentionally contains *no* provider handling.  Tracking code
is responsible for producing validated :class:`Position` fixes.
"""

from __future__ import annotations


def should_accept_fix(
    *,
    current_timestamp: int | None,
    incoming_timestamp: int,
) -> bool:
    """Decide whether an incoming fix replaces the current one.

    Latest timestamp wins; an equal timestamp is accepted so a repeated
    reading with better accuracy can land.
    """
    if current_timestamp is None:
        return True
    return incoming_timestamp >= current_timestamp


def is_superseded(request_id: int, latest_request_id: int) -> bool:
    """Whether a result for *request_id* arrived after a newer request was issued."""
    return request_id < latest_request_id
