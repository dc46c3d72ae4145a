from __future__ import annotations

from typing import Any

import pytest

from campusnav.exceptions import DataUnavailableError
from campusnav.index import EntityIndex, StaticEntityProvider
from campusnav.models.entity import CampusEntity
from campusnav.models.search import SearchMode
from campusnav.state.events import ChangeKind, StateChange


def _record(
    entity_id: int,
    name: str,
    number: str | None = None,
    *,
    latitude: Any = "9.9639",
    longitude: Any = "76.4083",
) -> dict[str, Any]:
    return {
        "id": entity_id,
        "name": name,
        "number": number,
        "floor": {
            "name": "Ground",
            "building": {"name": "Ramanujan Block", "latitude": latitude, "longitude": longitude},
        },
    }


def _entities(*names: str) -> list[CampusEntity]:
    return [CampusEntity(id=str(i), display_name=name) for i, name in enumerate(names, start=1)]


class _FlakyProvider:
    def __init__(self, records: list[dict[str, Any]]) -> None:
        self.records = records
        self.fail_with: Exception | None = None

    async def fetch_all(self) -> list[dict[str, Any]]:
        if self.fail_with is not None:
            raise self.fail_with
        return self.records


def test_substring_search_is_case_insensitive() -> None:
    index = EntityIndex()
    index.replace(_entities("Lab 101", "Library", "Admin Block"))

    assert index.lookup("lab").names == ["Lab 101"]
    assert index.lookup("LIB").names == ["Library"]
    assert index.filter("  block ").names == ["Admin Block"]


def test_empty_query_depends_on_search_mode() -> None:
    index = EntityIndex()
    index.replace(_entities("Lab 101", "Library", "Admin Block"))

    browse = index.search("", SearchMode.FILTER)
    assert browse.mode == SearchMode.FILTER
    assert browse.names == ["Lab 101", "Library", "Admin Block"]

    directed = index.search("   ", SearchMode.LOOKUP)
    assert directed.mode == SearchMode.LOOKUP
    assert len(directed) == 0
    assert index.lookup(None).entities == ()


def test_sentinel_looking_query_is_kept() -> None:
    index = EntityIndex()
    index.replace(_entities("NaN Lab", "Library"))

    assert index.lookup("null").query == "null"
    assert index.filter("--").query == "--"

    result = index.lookup("NaN")
    assert result.query == "nan"
    assert result.names == ["NaN Lab"]


def test_secondary_label_is_searchable() -> None:
    index = EntityIndex()
    index.replace(
        [
            CampusEntity(id="1", display_name="Computer Lab", secondary_label="C-204"),
            CampusEntity(id="2", display_name="Seminar Hall", secondary_label="S-101"),
        ]
    )

    assert index.lookup("c-2").names == ["Computer Lab"]
    assert index.lookup("101").names == ["Seminar Hall"]


def test_search_results_keep_roster_order() -> None:
    index = EntityIndex()
    index.replace(_entities("Physics Lab", "Chemistry Lab", "Biology Lab"))

    assert [entity.id for entity in index.lookup("lab")] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_load_replaces_roster_and_notifies() -> None:
    index = EntityIndex(StaticEntityProvider([_record(1, "Lab 101", "101"), _record(2, "Library")]))
    changes: list[StateChange] = []
    index.subscribe(changes.append)

    roster = await index.load()

    assert [entity.display_name for entity in roster] == ["Lab 101", "Library"]
    assert index.get("1") is not None
    assert index.get("1").secondary_label == "101"  # type: ignore[union-attr]
    assert index.loaded_at is not None
    assert [c.kind for c in changes] == [ChangeKind.ROSTER]
    assert changes[0].value == 2


@pytest.mark.asyncio
async def test_failed_load_keeps_previous_roster() -> None:
    provider = _FlakyProvider([_record(1, "Lab 101"), _record(2, "Library")])
    index = EntityIndex(provider)
    await index.load()

    provider.fail_with = ConnectionError("store offline")
    with pytest.raises(DataUnavailableError):
        await index.load()

    assert len(index) == 2
    assert index.last_error is not None
    assert index.lookup("lab").names == ["Lab 101"]


@pytest.mark.asyncio
async def test_malformed_record_fails_whole_load() -> None:
    provider = _FlakyProvider([_record(1, "Lab 101")])
    index = EntityIndex(provider)
    await index.load()

    provider.records = [_record(2, "Library"), {"id": 3, "floor": None}]
    with pytest.raises(DataUnavailableError):
        await index.load()

    assert [entity.display_name for entity in index.roster] == ["Lab 101"]


@pytest.mark.asyncio
async def test_non_list_payload_is_data_unavailable() -> None:
    provider = _FlakyProvider([])
    provider.records = {"rooms": []}  # type: ignore[assignment]
    index = EntityIndex(provider)

    with pytest.raises(DataUnavailableError):
        await index.load()


@pytest.mark.asyncio
async def test_load_without_provider_is_data_unavailable() -> None:
    with pytest.raises(DataUnavailableError):
        await EntityIndex().load()


def test_record_with_coordinates_parses_building_location() -> None:
    entity = CampusEntity.from_record(_record(7, "Lab 101", "101"))

    assert entity.id == "7"
    assert entity.parent_floor_name == "Ground"
    assert entity.parent_building_name == "Ramanujan Block"
    assert entity.building_coordinates is not None
    assert entity.building_coordinates.as_tuple() == (9.9639, 76.4083)


@pytest.mark.parametrize(
    ("latitude", "longitude"),
    [
        ("0", "76.4083"),
        ("9.9639", 0),
        ("north", "76.4083"),
        (None, None),
        ("", "76.4083"),
        ("95.0", "76.4083"),
    ],
)
def test_unusable_coordinates_mean_no_coordinates(latitude: Any, longitude: Any) -> None:
    entity = CampusEntity.from_record(_record(7, "Lab 101", latitude=latitude, longitude=longitude))

    assert entity.building_coordinates is None
    assert entity.has_coordinates is False


def test_record_without_floor_has_no_coordinates() -> None:
    entity = CampusEntity.from_record({"id": 9, "name": "Open Air Theatre"})

    assert entity.parent_floor_name is None
    assert entity.building_coordinates is None


def test_record_without_name_is_rejected() -> None:
    with pytest.raises(ValueError):
        CampusEntity.from_record({"id": 9, "name": "   "})
