"""campusnav - Async campus location, search and walking-route state."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("campusnav")
except PackageNotFoundError:
    __version__ = "0+local"
from campusnav.client import CampusNavigator
from campusnav.config import CampusNavConfig
from campusnav.exceptions import (
    CampusNavConfigError,
    CampusNavError,
    CampusNavTransportError,
    DataUnavailableError,
    LocationError,
    LocationPermissionDeniedError,
    LocationTimeoutError,
    LocationUnavailableError,
    LocationUnsupportedError,
    RoutingError,
)
from campusnav.index import EntityIndex, EntityProvider, PostgrestEntityProvider, StaticEntityProvider
from campusnav.location import GeolocationProvider, LocationTracker, WatchHandle
from campusnav.models import (
    CampusEntity,
    Coordinate,
    DestinationPhase,
    LocationErrorCode,
    LocationOptions,
    Marker,
    Position,
    RoutePath,
    RouteSource,
    SearchMode,
    SearchResult,
    ViewState,
)
from campusnav.routing import OsrmRouteProvider, RouteProvider, RouteResolver, StraightLineRouteProvider
from campusnav.view import MapViewState

__all__ = [
    "__version__",
    "CampusEntity",
    "CampusNavConfig",
    "CampusNavConfigError",
    "CampusNavError",
    "CampusNavTransportError",
    "CampusNavigator",
    "Coordinate",
    "DataUnavailableError",
    "DestinationPhase",
    "EntityIndex",
    "EntityProvider",
    "GeolocationProvider",
    "LocationError",
    "LocationErrorCode",
    "LocationOptions",
    "LocationPermissionDeniedError",
    "LocationTimeoutError",
    "LocationTracker",
    "LocationUnavailableError",
    "LocationUnsupportedError",
    "MapViewState",
    "Marker",
    "OsrmRouteProvider",
    "Position",
    "PostgrestEntityProvider",
    "RouteProvider",
    "RoutePath",
    "RouteResolver",
    "RouteSource",
    "RoutingError",
    "SearchMode",
    "SearchResult",
    "StaticEntityProvider",
    "StraightLineRouteProvider",
    "ViewState",
    "WatchHandle",
]
