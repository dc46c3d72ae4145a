"""Single-slot store for the current position.

Only :class:`campusnav.location.LocationTracker` writes to it.  Readers
get immutable :class:`Position` snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from campusnav.models.position import Position
from campusnav.state.events import ChangeKind, ChangeNotifier, Listener
from campusnav.state.policy import should_accept_fix

_logger = logging.getLogger(__name__)


class PositionStore:
    """Holds at most one current :class:`Position`.

    Latest-by-timestamp wins: given the same sequence of fixes the store
    always ends up holding the same one, whatever order they arrive in.
    """

    def __init__(self) -> None:
        self._current: Position | None = None
        self._notifier = ChangeNotifier()

    @property
    def current(self) -> Position | None:
        return self._current

    def apply(self, position: Position) -> bool:
        """Offer a fix; returns ``True`` if it became current."""
        current = self._current
        if not should_accept_fix(
            current_timestamp=current.timestamp if current is not None else None,
            incoming_timestamp=position.timestamp,
        ):
            _logger.debug(
                "Dropping out-of-order fix ts=%d (current ts=%d)",
                position.timestamp,
                current.timestamp if current is not None else -1,
            )
            return False

        self._current = position
        self._notifier.publish(ChangeKind.POSITION, position)
        return True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._notifier.subscribe(listener)
