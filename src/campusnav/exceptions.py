"""Custom exception hierarchy for campusnav."""

from __future__ import annotations

from campusnav.models.position import LocationErrorCode


class CampusNavError(Exception):
    """Base exception for all campusnav errors."""


class CampusNavConfigError(CampusNavError):
    """Invalid or missing configuration."""


class CampusNavTransportError(CampusNavError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class LocationError(CampusNavError):
    """The device location could not be obtained.

    ``code`` tells the presentation layer which degraded state to show.
    Use :meth:`from_code` to get the matching subclass for a raw
    geolocation error code.
    """

    default_code: LocationErrorCode = LocationErrorCode.UNAVAILABLE

    def __init__(self, message: str = "", *, code: LocationErrorCode | None = None) -> None:
        self.code = code if code is not None else self.default_code
        super().__init__(message or self.code.message)

    @classmethod
    def from_code(cls, code: int | LocationErrorCode, message: str = "") -> LocationError:
        resolved = LocationErrorCode(code)
        error_cls = _LOCATION_ERRORS.get(resolved, LocationError)
        return error_cls(message, code=resolved)


class LocationPermissionDeniedError(LocationError):
    """The user refused location access."""

    default_code = LocationErrorCode.PERMISSION_DENIED


class LocationUnavailableError(LocationError):
    """The device could not determine a position."""

    default_code = LocationErrorCode.UNAVAILABLE


class LocationTimeoutError(LocationError):
    """No fix arrived within the requested timeout."""

    default_code = LocationErrorCode.TIMEOUT


class LocationUnsupportedError(LocationError):
    """No geolocation capability is available."""

    default_code = LocationErrorCode.UNSUPPORTED


_LOCATION_ERRORS: dict[LocationErrorCode, type[LocationError]] = {
    LocationErrorCode.PERMISSION_DENIED: LocationPermissionDeniedError,
    LocationErrorCode.UNAVAILABLE: LocationUnavailableError,
    LocationErrorCode.TIMEOUT: LocationTimeoutError,
    LocationErrorCode.UNSUPPORTED: LocationUnsupportedError,
}


class DataUnavailableError(CampusNavError):
    """The entity roster could not be loaded.

    The previously loaded roster stays in place when this is raised.
    """


class RoutingError(CampusNavError):
    """A walking route could not be obtained from the routing provider.

    Covers network errors, timeouts, non-``Ok`` responses and malformed
    geometry.  :class:`campusnav.routing.RouteResolver` always absorbs it
    and substitutes the straight-line fallback.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)
