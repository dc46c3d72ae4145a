"""Reconciled map view model.

:class:`MapViewState` only reads the position, roster and route slots;
it never writes them.  Each change it hears about (new position, new
selection, new route) produces a fresh :class:`ViewState` that is pushed
to subscribers with the :class:`ChangeKind` that triggered it.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable

from campusnav.config import CampusNavConfig
from campusnav.location import LocationTracker
from campusnav.models.entity import CampusEntity
from campusnav.models.route import RoutePath
from campusnav.models.view import DestinationPhase, Marker, ViewState
from campusnav.routing import RouteResolver
from campusnav.state.events import ChangeKind, ChangeNotifier, Listener, StateChange

_logger = logging.getLogger(__name__)

USER_MARKER_LABEL = "Your Location"


class MapViewState:
    """Compose tracker and resolver into a single :class:`ViewState`."""

    def __init__(
        self,
        tracker: LocationTracker,
        resolver: RouteResolver,
        config: CampusNavConfig | None = None,
    ) -> None:
        self._tracker = tracker
        self._resolver = resolver
        self._config = config or CampusNavConfig()
        self._destination: CampusEntity | None = None
        self._phase = DestinationPhase.NONE
        self._selection_ids = itertools.count(1)
        self._selection_id = 0
        self._pending: set[asyncio.Task[RoutePath]] = set()
        self._notifier = ChangeNotifier()
        self._unsubscribers = [
            tracker.subscribe(self._on_location_change),
            resolver.subscribe(self._on_route_change),
        ]
        self._view = self._compute()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def destination(self) -> CampusEntity | None:
        return self._destination

    @property
    def phase(self) -> DestinationPhase:
        return self._phase

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Receive a :class:`StateChange` whose ``value`` is the new :class:`ViewState`."""
        return self._notifier.subscribe(listener)

    def _compute(self) -> ViewState:
        position = self._tracker.current
        last_error = self._tracker.last_error

        user_marker: Marker | None = None
        if position is not None:
            center = position.coordinate
            zoom = self._config.found_zoom
            user_marker = Marker(
                coordinate=position.coordinate,
                label=USER_MARKER_LABEL,
                accuracy_meters=position.accuracy_meters,
            )
        else:
            center = self._config.default_center
            zoom = self._config.default_zoom

        destination_marker: Marker | None = None
        destination = self._destination
        if destination is not None and destination.building_coordinates is not None:
            destination_marker = Marker(
                coordinate=destination.building_coordinates,
                label=destination.display_name,
                entity_id=destination.id,
            )

        path = self._resolver.current if self._phase == DestinationPhase.SHOWN else RoutePath.empty()

        return ViewState(
            center=center,
            zoom_level=zoom,
            user_marker=user_marker,
            destination_marker=destination_marker,
            path=path,
            phase=self._phase,
            location_error=last_error.code if last_error is not None else None,
        )

    def _refresh(self, kind: ChangeKind) -> None:
        self._view = self._compute()
        self._notifier.publish(kind, self._view)

    # ------------------------------------------------------------------
    # Destination lifecycle
    # ------------------------------------------------------------------

    async def select(self, entity: CampusEntity) -> ViewState:
        """Make *entity* the destination and resolve a route to it.

        An entity without building coordinates is a no-op: no marker and
        no path.  Cancelling the call while the route is still resolving
        drops the selection.
        """
        destination = entity.building_coordinates
        if destination is None:
            _logger.debug("Entity %s has no coordinates; selection ignored", entity.id)
            return self._view

        self._cancel_pending()
        selection_id = next(self._selection_ids)
        self._selection_id = selection_id
        self._destination = entity
        self._phase = DestinationPhase.RESOLVING
        self._refresh(ChangeKind.SELECTION)

        origin = self._tracker.current
        try:
            await self._resolver.update(origin, destination)
        except asyncio.CancelledError:
            if self._selection_id == selection_id and self._phase == DestinationPhase.RESOLVING:
                _logger.debug("Selection of %s cancelled while resolving", entity.id)
                self._destination = None
                self._phase = DestinationPhase.NONE
                self._resolver.clear()
                self._refresh(ChangeKind.SELECTION)
            raise

        if self._selection_id == selection_id and self._phase == DestinationPhase.RESOLVING:
            self._phase = DestinationPhase.SHOWN
            self._refresh(ChangeKind.ROUTE)
        return self._view

    def clear_destination(self) -> ViewState:
        """Drop the destination marker and path."""
        self._cancel_pending()
        self._selection_id = next(self._selection_ids)
        self._destination = None
        self._phase = DestinationPhase.NONE
        self._resolver.clear()
        self._refresh(ChangeKind.SELECTION)
        return self._view

    def close(self) -> None:
        """Detach from the tracker and resolver."""
        self._cancel_pending()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # ------------------------------------------------------------------
    # Change handlers
    # ------------------------------------------------------------------

    def _on_route_change(self, change: StateChange) -> None:
        if self._phase == DestinationPhase.RESOLVING and self._destination is not None:
            self._phase = DestinationPhase.SHOWN
        self._refresh(ChangeKind.ROUTE)

    def _on_location_change(self, change: StateChange) -> None:
        self._refresh(change.kind)
        if change.kind == ChangeKind.POSITION:
            self._maybe_route_on_first_fix()

    def _maybe_route_on_first_fix(self) -> None:
        destination = self._destination
        if (
            not self._config.route_on_first_fix
            or self._pending
            or self._phase != DestinationPhase.SHOWN
            or destination is None
            or destination.building_coordinates is None
            or not self._resolver.current.is_empty
        ):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.debug("No running loop; route for first fix not scheduled")
            return

        origin = self._tracker.current
        _logger.debug("First fix after selection; resolving route to %s", destination.id)
        task = loop.create_task(self._resolver.update(origin, destination.building_coordinates))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _cancel_pending(self) -> None:
        for task in self._pending:
            task.cancel()
        self._pending.clear()
