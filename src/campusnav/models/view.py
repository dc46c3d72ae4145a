"""Renderable view model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from campusnav.models._base import CampusBaseModel
from campusnav.models.position import Coordinate, LocationErrorCode
from campusnav.models.route import RoutePath


class DestinationPhase(StrEnum):
    """Destination lifecycle.

    ``NONE`` -> ``RESOLVING`` on selection, ``RESOLVING`` -> ``SHOWN``
    when the route resolves (provider or fallback), any -> ``NONE`` on
    clear.
    """

    NONE = "none"
    RESOLVING = "resolving"
    SHOWN = "shown"


class Marker(CampusBaseModel):
    coordinate: Coordinate
    label: str = ""
    accuracy_meters: float | None = None
    entity_id: str | None = None


class ViewState(CampusBaseModel):
    """Everything the presentation layer needs to draw the map.

    Parameters
    ----------
    center : Coordinate
        Map center: the current position, or the configured default.
    zoom_level : int
        Found zoom once a position exists, default zoom otherwise.
    user_marker : Marker or None
        Current position with its accuracy radius.
    destination_marker : Marker or None
        Selected entity's building location.
    path : RoutePath
        Route to draw; empty when there is nothing to draw.
    phase : DestinationPhase
        Destination lifecycle state.
    location_error : LocationErrorCode or None
        Last location failure, shown as a non-fatal banner.
    """

    center: Coordinate
    zoom_level: int
    user_marker: Marker | None = None
    destination_marker: Marker | None = None
    path: RoutePath = Field(default_factory=RoutePath)
    phase: DestinationPhase = DestinationPhase.NONE
    location_error: LocationErrorCode | None = None

    @property
    def location_error_message(self) -> str | None:
        if self.location_error is None:
            return None
        return self.location_error.message
