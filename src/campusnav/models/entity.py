"""Campus entity model."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from campusnav.ingestion.normalize import safe_float, safe_str
from campusnav.models._base import CampusBaseModel
from campusnav.models.position import Coordinate


def parse_coordinate(latitude: Any, longitude: Any) -> Coordinate | None:
    """Parse decimal latitude/longitude strings into a :class:`Coordinate`.

    A value that fails to parse, is zero, is missing, or is out of range
    means the entity has no usable coordinates.
    """
    lat = safe_float(latitude)
    lng = safe_float(longitude)
    if lat is None or lng is None:
        return None
    if lat == 0 or lng == 0:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return Coordinate(latitude=lat, longitude=lng)


class CampusEntity(CampusBaseModel):
    """A searchable room or building.

    Parameters
    ----------
    id : str
        Stable identifier from the entity store.
    display_name : str
        Name shown to the user and matched by search.
    secondary_label : str or None
        Short label such as a room number; also matched by search.
    parent_floor_name : str or None
        Name of the floor the room is on.
    parent_building_name : str or None
        Name of the building the room is in.
    building_coordinates : Coordinate or None
        Location of the parent building.  ``None`` disables route
        resolution for this entity.
    raw : dict
        Original provider record.
    """

    _LITERAL_FIELDS: ClassVar[frozenset[str]] = frozenset({"display_name", "parent_floor_name", "parent_building_name"})

    id: str
    display_name: str = Field(..., min_length=1)
    secondary_label: str | None = None
    parent_floor_name: str | None = None
    parent_building_name: str | None = None
    building_coordinates: Coordinate | None = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("secondary_label", mode="before")
    @classmethod
    def _coerce_label(cls, value: Any) -> str | None:
        return safe_str(value)

    @property
    def has_coordinates(self) -> bool:
        return self.building_coordinates is not None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> CampusEntity:
        """Build an entity from an entity-provider record.

        Expected shape::

            {"id": 7, "name": "Lab 101", "number": "101",
             "floor": {"name": "First",
                       "building": {"name": "Ramanujan Block",
                                    "latitude": "9.9639", "longitude": "76.4083"}}}

        Raises ``ValueError`` (a pydantic ``ValidationError``) when the
        record has no usable id or name.
        """
        if not isinstance(record, dict):
            raise ValueError(f"entity record must be an object, got {type(record).__name__}")

        floor = record.get("floor")
        floor_data: dict[str, Any] = floor if isinstance(floor, dict) else {}
        building = floor_data.get("building")
        building_data: dict[str, Any] = building if isinstance(building, dict) else {}

        return cls.model_validate(
            {
                "id": record.get("id"),
                "display_name": safe_str(record.get("name")),
                "secondary_label": record.get("number"),
                "parent_floor_name": safe_str(floor_data.get("name")),
                "parent_building_name": safe_str(building_data.get("name")),
                "building_coordinates": parse_coordinate(
                    building_data.get("latitude"),
                    building_data.get("longitude"),
                ),
                "raw": record,
            }
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name or secondary label.

        *query* must already be normalized (see
        :func:`campusnav.ingestion.normalize.normalize_query`).
        """
        if query in self.display_name.casefold():
            return True
        return self.secondary_label is not None and query in self.secondary_label.casefold()
