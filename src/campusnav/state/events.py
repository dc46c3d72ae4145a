"""State change notifications.

Every single-writer slot (position, roster, route) announces its changes
with a :class:`StateChange`.  Readers such as the map view subscribe to
these instead of polling.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_logger = logging.getLogger(__name__)


class ChangeKind(StrEnum):
    POSITION = "position"
    ROSTER = "roster"
    ROUTE = "route"
    SELECTION = "selection"
    LOCATION_ERROR = "location_error"


class StateChange(BaseModel):
    """A change published by the owner of a state slot."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ChangeKind
    value: Any = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


Listener = Callable[[StateChange], None]


class ChangeNotifier:
    """Fan-out of :class:`StateChange` to registered listeners.

    A listener that raises is logged and skipped; it never breaks the
    writer that published the change.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, kind: ChangeKind, value: Any = None) -> None:
        change = StateChange(kind=kind, value=value)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                _logger.debug("%s listener failed", kind, exc_info=True)
