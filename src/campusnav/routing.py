"""Walking route resolution with a straight-line fallback.

The resolver never fails: whenever the provider cannot deliver a usable
route (network error, timeout, non-``Ok`` response, malformed geometry)
the two-point segment ``[origin, destination]`` is drawn instead.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from typing import Protocol

from campusnav._api.routing import fetch_walking_route
from campusnav._constants import COORDINATE_TOLERANCE, ROUTING_TIMEOUT_S
from campusnav._transport import Transport
from campusnav.config import CampusNavConfig
from campusnav.exceptions import RoutingError
from campusnav.models.position import Coordinate, Position
from campusnav.models.route import RoutePath, RouteSource
from campusnav.state.events import ChangeKind, ChangeNotifier, Listener
from campusnav.state.policy import is_superseded

_logger = logging.getLogger(__name__)


class RouteProvider(Protocol):
    """Pluggable source of walking geometry."""

    async def fetch_route(self, origin: Coordinate, destination: Coordinate) -> list[Coordinate]:
        """Return route points in (latitude, longitude) order or raise :class:`RoutingError`."""
        ...


class OsrmRouteProvider:
    """Route provider backed by an OSRM ``/route`` service."""

    def __init__(self, config: CampusNavConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def fetch_route(self, origin: Coordinate, destination: Coordinate) -> list[Coordinate]:
        return await fetch_walking_route(self._config, self._transport, origin, destination)


class StraightLineRouteProvider:
    """Offline provider: always the direct segment."""

    async def fetch_route(self, origin: Coordinate, destination: Coordinate) -> list[Coordinate]:
        return [origin, destination]


def _anchor(points: list[Coordinate], origin: Coordinate, destination: Coordinate, tolerance: float) -> list[Coordinate]:
    """Make the path start at *origin* and end at *destination*.

    Routing services snap endpoints to the nearest walkway; the snapped
    points are kept and the true endpoints added around them.
    """
    anchored = list(points)
    if not anchored[0].is_close(origin, tolerance):
        anchored.insert(0, origin)
    if not anchored[-1].is_close(destination, tolerance):
        anchored.append(destination)
    return anchored


class RouteResolver:
    """Produce a displayable path and own the current route path.

    Parameters
    ----------
    provider : RouteProvider or None
        Source of walking geometry.  ``None`` always uses the fallback.
    timeout : float
        Seconds allowed for the provider call.
    tolerance : float
        Degrees within which a route endpoint counts as the
        origin/destination.
    """

    def __init__(
        self,
        provider: RouteProvider | None,
        *,
        timeout: float = ROUTING_TIMEOUT_S,
        tolerance: float = COORDINATE_TOLERANCE,
    ) -> None:
        self._provider = provider
        self._timeout = timeout
        self._tolerance = tolerance
        self._current = RoutePath.empty()
        self._request_ids = itertools.count(1)
        self._latest_request = 0
        self._notifier = ChangeNotifier()

    @property
    def current(self) -> RoutePath:
        return self._current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Receive ``ROUTE`` changes."""
        return self._notifier.subscribe(listener)

    async def resolve(self, origin: Position | Coordinate | None, destination: Coordinate) -> RoutePath:
        """Return a path from *origin* to *destination*.

        No origin yields an empty path.  Otherwise the provider route is
        returned, or the straight-line fallback if the provider fails.
        """
        if origin is None:
            return RoutePath.empty()
        start = origin.coordinate if isinstance(origin, Position) else origin

        if self._provider is None:
            return RoutePath.straight(start, destination)

        try:
            points = await asyncio.wait_for(self._provider.fetch_route(start, destination), self._timeout)
        except TimeoutError:
            _logger.warning("Routing timed out after %.1fs; using straight line", self._timeout)
            return RoutePath.straight(start, destination)
        except RoutingError as exc:
            _logger.warning("Routing failed (%s); using straight line", exc)
            return RoutePath.straight(start, destination)
        except Exception:
            _logger.warning("Route provider raised; using straight line", exc_info=True)
            return RoutePath.straight(start, destination)

        if not isinstance(points, list) or len(points) < 2 or not all(isinstance(p, Coordinate) for p in points):
            _logger.warning("Route provider returned unusable geometry; using straight line")
            return RoutePath.straight(start, destination)

        return RoutePath.from_points(_anchor(points, start, destination, self._tolerance), RouteSource.PROVIDER)

    async def update(self, origin: Position | Coordinate | None, destination: Coordinate) -> RoutePath:
        """Resolve and make the result the current route path.

        A result overtaken by a newer :meth:`update` or :meth:`clear` is
        returned but not stored.
        """
        request_id = next(self._request_ids)
        self._latest_request = request_id
        path = await self.resolve(origin, destination)
        if is_superseded(request_id, self._latest_request):
            _logger.debug("Route request id=%d superseded; discarded", request_id)
            return path
        self._current = path
        self._notifier.publish(ChangeKind.ROUTE, path)
        return path

    def clear(self) -> None:
        """Drop the current path and invalidate any in-flight update."""
        self._latest_request = next(self._request_ids)
        if self._current.is_empty:
            return
        self._current = RoutePath.empty()
        self._notifier.publish(ChangeKind.ROUTE, self._current)
