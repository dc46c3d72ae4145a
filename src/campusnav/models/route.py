"""Route path model."""

from __future__ import annotations

import math
from collections.abc import Iterable
from enum import StrEnum

from campusnav.models._base import CampusBaseModel
from campusnav.models.position import Coordinate

_EARTH_RADIUS_M = 6_371_000.0


class RouteSource(StrEnum):
    PROVIDER = "provider"
    FALLBACK = "fallback"
    NONE = "none"


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return _EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


class RoutePath(CampusBaseModel):
    """Ordered walking path in (latitude, longitude) order.

    An empty path means there is nothing to draw.
    """

    points: tuple[Coordinate, ...] = ()
    source: RouteSource = RouteSource.NONE

    @classmethod
    def empty(cls) -> RoutePath:
        return cls()

    @classmethod
    def straight(cls, origin: Coordinate, destination: Coordinate) -> RoutePath:
        """The two-point fallback segment."""
        return cls(points=(origin, destination), source=RouteSource.FALLBACK)

    @classmethod
    def from_points(cls, points: Iterable[Coordinate], source: RouteSource = RouteSource.PROVIDER) -> RoutePath:
        return cls(points=tuple(points), source=source)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def is_fallback(self) -> bool:
        return self.source == RouteSource.FALLBACK

    @property
    def distance_meters(self) -> float:
        return sum(haversine_meters(a, b) for a, b in zip(self.points, self.points[1:]))

    def as_pairs(self) -> list[tuple[float, float]]:
        return [point.as_tuple() for point in self.points]
