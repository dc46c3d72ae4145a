"""Walking route endpoint (OSRM).

Endpoint:
  - GET /route/v1/{profile}/{lng},{lat};{lng},{lat}
"""

from __future__ import annotations

import logging
from typing import Any

from campusnav._constants import OSRM_OK_CODE
from campusnav._transport import Transport
from campusnav.config import CampusNavConfig
from campusnav.exceptions import CampusNavTransportError, RoutingError
from campusnav.models.position import Coordinate

_logger = logging.getLogger(__name__)

_ROUTE_PARAMS: dict[str, str] = {
    "overview": "full",
    "geometries": "geojson",
    "steps": "false",
}


def build_route_url(base_url: str, profile: str, origin: Coordinate, destination: Coordinate) -> str:
    """Build the route URL; OSRM wants ``lng,lat`` pairs separated by ``;``."""
    coords = f"{origin.to_lnglat()};{destination.to_lnglat()}"
    return f"{base_url.rstrip('/')}/route/v1/{profile}/{coords}"


def parse_route_geometry(response: Any, *, endpoint: str = "") -> list[Coordinate]:
    """Extract the first route's geometry as (latitude, longitude) points.

    OSRM delivers GeoJSON ``[lng, lat]`` pairs; they are transposed here.

    Raises
    ------
    RoutingError
        When the response code is not ``"Ok"`` or the geometry is
        missing, malformed, or has fewer than two points.
    """
    if not isinstance(response, dict):
        raise RoutingError("Route response is not an object", endpoint=endpoint)

    code = str(response.get("code", ""))
    if code != OSRM_OK_CODE:
        raise RoutingError(
            f"Routing failed: code={code} message={response.get('message', '')}",
            code=code,
            endpoint=endpoint,
        )

    routes = response.get("routes")
    if not isinstance(routes, list) or not routes or not isinstance(routes[0], dict):
        raise RoutingError("Route response has no routes", code=code, endpoint=endpoint)

    geometry = routes[0].get("geometry")
    coordinates = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if not isinstance(coordinates, list) or len(coordinates) < 2:
        raise RoutingError("Route geometry is missing or too short", code=code, endpoint=endpoint)

    points: list[Coordinate] = []
    for pair in coordinates:
        if not isinstance(pair, (list, tuple)) or len(pair) < 2:
            raise RoutingError(f"Malformed route coordinate: {pair!r}", code=code, endpoint=endpoint)
        try:
            points.append(Coordinate.from_lnglat(pair[:2]))
        except (TypeError, ValueError) as exc:
            raise RoutingError(f"Malformed route coordinate: {pair!r}", code=code, endpoint=endpoint) from exc
    return points


async def fetch_walking_route(
    config: CampusNavConfig,
    transport: Transport,
    origin: Coordinate,
    destination: Coordinate,
) -> list[Coordinate]:
    """Fetch a walking route from the configured OSRM server.

    Raises
    ------
    RoutingError
        On any transport or response failure.
    """
    url = build_route_url(config.routing_base_url, config.routing_profile, origin, destination)
    try:
        response = await transport.get_json(url, params=_ROUTE_PARAMS, timeout=config.routing_timeout)
    except CampusNavTransportError as exc:
        raise RoutingError(str(exc), endpoint=exc.endpoint) from exc

    points = parse_route_geometry(response, endpoint="/route/v1")
    _logger.debug("Route received: %d points", len(points))
    return points
