"""Data models for campusnav."""

from campusnav.models._base import CampusBaseModel
from campusnav.models.entity import CampusEntity
from campusnav.models.position import (
    ONE_SHOT_DEFAULTS,
    WATCH_DEFAULTS,
    Coordinate,
    LocationErrorCode,
    LocationOptions,
    Position,
)
from campusnav.models.route import RoutePath, RouteSource, haversine_meters
from campusnav.models.search import SearchMode, SearchResult
from campusnav.models.view import DestinationPhase, Marker, ViewState

__all__ = [
    "CampusBaseModel",
    "CampusEntity",
    "Coordinate",
    "DestinationPhase",
    "LocationErrorCode",
    "LocationOptions",
    "Marker",
    "ONE_SHOT_DEFAULTS",
    "Position",
    "RoutePath",
    "RouteSource",
    "SearchMode",
    "SearchResult",
    "ViewState",
    "WATCH_DEFAULTS",
    "haversine_meters",
]
