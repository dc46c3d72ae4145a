from __future__ import annotations

from typing import Any

import pytest

from campusnav._api.entities import fetch_entity_records
from campusnav._api.routing import build_route_url, fetch_walking_route, parse_route_geometry
from campusnav.config import CampusNavConfig
from campusnav.exceptions import CampusNavConfigError, CampusNavTransportError, DataUnavailableError, RoutingError
from campusnav.models.position import Coordinate

ORIGIN = Coordinate(latitude=9.9641, longitude=76.4081)
DESTINATION = Coordinate(latitude=9.9648, longitude=76.4085)


class _RecordingTransport:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def get_json(
        self,
        url: str,
        *,
        params: Any = None,
        headers: Any = None,
        timeout: float | None = None,
    ) -> Any:
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def test_build_route_url_uses_lng_lat_order() -> None:
    url = build_route_url("http://osrm.local:5000/", "foot", ORIGIN, DESTINATION)

    assert url == "http://osrm.local:5000/route/v1/foot/76.4081,9.9641;76.4085,9.9648"


def test_parse_route_geometry_reads_first_route() -> None:
    response = {
        "code": "Ok",
        "routes": [
            {"geometry": {"coordinates": [[76.4081, 9.9641], [76.4085, 9.9648]]}},
            {"geometry": {"coordinates": [[0.0, 0.0], [1.0, 1.0]]}},
        ],
    }

    points = parse_route_geometry(response)

    assert [p.as_tuple() for p in points] == [(9.9641, 76.4081), (9.9648, 76.4085)]


@pytest.mark.parametrize(
    "response",
    [
        [],
        {"code": "NoRoute", "message": "Impossible route between points"},
        {"code": "Ok", "routes": []},
        {"code": "Ok", "routes": [{"geometry": "encoded-polyline"}]},
        {"code": "Ok", "routes": [{"geometry": {"coordinates": [[76.4081, 9.9641]]}}]},
        {"code": "Ok", "routes": [{"geometry": {"coordinates": [[76.4081, 9.9641], [76.4085]]}}]},
        {"code": "Ok", "routes": [{"geometry": {"coordinates": [[76.4081, 9.9641], ["east", "north"]]}}]},
        {"code": "Ok", "routes": [{"geometry": {"coordinates": [[76.4081, 9.9641], [76.4085, 123.0]]}}]},
    ],
)
def test_parse_route_geometry_rejects_unusable_responses(response: Any) -> None:
    with pytest.raises(RoutingError):
        parse_route_geometry(response, endpoint="/route/v1")


def test_non_ok_code_is_kept_on_error() -> None:
    with pytest.raises(RoutingError) as excinfo:
        parse_route_geometry({"code": "NoSegment"})

    assert excinfo.value.code == "NoSegment"


@pytest.mark.asyncio
async def test_fetch_walking_route_sends_geojson_request() -> None:
    transport = _RecordingTransport(
        {"code": "Ok", "routes": [{"geometry": {"coordinates": [[76.4081, 9.9641], [76.4085, 9.9648]]}}]}
    )
    config = CampusNavConfig(routing_base_url="http://osrm.local", routing_timeout=3.0)

    points = await fetch_walking_route(config, transport, ORIGIN, DESTINATION)

    assert len(points) == 2
    call = transport.calls[0]
    assert call["url"] == "http://osrm.local/route/v1/foot/76.4081,9.9641;76.4085,9.9648"
    assert call["params"] == {"overview": "full", "geometries": "geojson", "steps": "false"}
    assert call["timeout"] == 3.0


@pytest.mark.asyncio
async def test_fetch_walking_route_wraps_transport_errors() -> None:
    transport = _RecordingTransport(error=CampusNavTransportError("timed out", endpoint="/route/v1/foot"))

    with pytest.raises(RoutingError) as excinfo:
        await fetch_walking_route(CampusNavConfig(), transport, ORIGIN, DESTINATION)

    assert excinfo.value.endpoint == "/route/v1/foot"


@pytest.mark.asyncio
async def test_fetch_entity_records_sends_key_and_embedded_select() -> None:
    records = [{"id": 1, "name": "Lab 101"}]
    transport = _RecordingTransport(records)
    config = CampusNavConfig(entities_base_url="https://campus.example/", entities_api_key="anon-key")

    assert await fetch_entity_records(config, transport) == records

    call = transport.calls[0]
    assert call["url"] == "https://campus.example/rest/v1/rooms"
    assert call["headers"] == {"apikey": "anon-key", "authorization": "Bearer anon-key"}
    assert call["params"]["select"].startswith("id:room_id,name:room_name")
    assert "building:building_id(" in call["params"]["select"]
    assert call["timeout"] == 15.0


@pytest.mark.asyncio
async def test_fetch_entity_records_requires_base_url() -> None:
    with pytest.raises(CampusNavConfigError):
        await fetch_entity_records(CampusNavConfig(), _RecordingTransport([]))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "transport",
    [
        _RecordingTransport(error=CampusNavTransportError("HTTP 401", status_code=401)),
        _RecordingTransport({"message": "relation does not exist"}),
    ],
)
async def test_fetch_entity_records_failures_are_data_unavailable(transport: _RecordingTransport) -> None:
    config = CampusNavConfig(entities_base_url="https://campus.example")

    with pytest.raises(DataUnavailableError):
        await fetch_entity_records(config, transport)
