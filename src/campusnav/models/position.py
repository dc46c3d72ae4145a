"""Coordinates, position fixes and location request options."""

from __future__ import annotations

import enum
import math
import time
from datetime import UTC, datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from campusnav.models._base import CampusBaseModel


class LocationErrorCode(enum.IntEnum):
    """Geolocation failure codes.

    Values follow the W3C geolocation codes (1-3); ``UNSUPPORTED`` covers
    a missing geolocation capability.  Codes without a mapped member
    resolve to ``UNAVAILABLE``.
    """

    UNSUPPORTED = 0
    PERMISSION_DENIED = 1
    UNAVAILABLE = 2
    TIMEOUT = 3

    @classmethod
    def _missing_(cls, value: object) -> LocationErrorCode:
        return cls.UNAVAILABLE

    @property
    def message(self) -> str:
        """User-facing description of the failure."""
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES: dict[LocationErrorCode, str] = {
    LocationErrorCode.UNSUPPORTED: "Geolocation is not supported by this device.",
    LocationErrorCode.PERMISSION_DENIED: "Location access denied by user.",
    LocationErrorCode.UNAVAILABLE: "Location information is unavailable.",
    LocationErrorCode.TIMEOUT: "Location request timed out.",
}


def _now_ms() -> int:
    return int(time.time() * 1000)


class Coordinate(CampusBaseModel):
    """A WGS84 point in (latitude, longitude) order."""

    latitude: float = Field(..., ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(
        ...,
        ge=-180.0,
        le=180.0,
        validation_alias=AliasChoices("longitude", "lng", "lon"),
    )

    @classmethod
    def from_lnglat(cls, pair: Any) -> Coordinate:
        """Build from a GeoJSON-ordered ``[lng, lat]`` pair."""
        lng, lat = pair
        return cls(latitude=float(lat), longitude=float(lng))

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_lnglat(self) -> str:
        """Format as ``"lng,lat"`` for routing URLs."""
        return f"{self.longitude},{self.latitude}"

    def is_close(self, other: Coordinate, tolerance: float) -> bool:
        return abs(self.latitude - other.latitude) <= tolerance and abs(self.longitude - other.longitude) <= tolerance


class Position(CampusBaseModel):
    """A single device fix.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    accuracy_meters : float
        Radius of the 68% confidence circle, in meters.
    timestamp : int
        Epoch milliseconds at which the fix was taken.  Values that look
        like epoch seconds are scaled up; fractional milliseconds are
        truncated.
    """

    latitude: float = Field(..., ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(
        ...,
        ge=-180.0,
        le=180.0,
        validation_alias=AliasChoices("longitude", "lng", "lon"),
    )
    accuracy_meters: float = Field(default=0.0, ge=0.0, validation_alias=AliasChoices("accuracy_meters", "accuracy"))
    timestamp: int = Field(default_factory=_now_ms)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return int(value.timestamp() * 1000)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            return value
        if 0 < value < 1e11:
            return int(value * 1000)
        # Sub-millisecond precision is dropped.
        return int(value)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    @property
    def observed_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=UTC)


class LocationOptions(CampusBaseModel):
    """Options passed to the geolocation provider for a request or watch."""

    enable_high_accuracy: bool = True
    timeout_ms: int = Field(default=10_000, gt=0)
    max_fix_age_ms: int = Field(default=60_000, ge=0)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


#: Defaults for a single "where am I" request.
ONE_SHOT_DEFAULTS = LocationOptions(enable_high_accuracy=True, timeout_ms=10_000, max_fix_age_ms=60_000)
#: Defaults for continuous tracking.
WATCH_DEFAULTS = LocationOptions(enable_high_accuracy=True, timeout_ms=5_000, max_fix_age_ms=30_000)
