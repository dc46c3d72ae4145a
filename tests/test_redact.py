from __future__ import annotations

from campusnav._redact import redact_for_log


def test_redact_for_log_redacts_credentials() -> None:
    payload = {
        "select": "id:room_id,name:room_name",
        "apikey": "anon-key",
        "Authorization": "Bearer anon-key",
        "nested": {"access_token": "jwt", "order": "room_number.asc"},
    }

    redacted = redact_for_log(payload)
    assert redacted["select"] == "id:room_id,name:room_name"
    assert redacted["apikey"] == "<redacted>"
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["nested"]["access_token"] == "<redacted>"
    assert redacted["nested"]["order"] == "room_number.asc"


def test_redact_for_log_leaves_room_fields_alone() -> None:
    record = {"name": "Lab 101", "number": "101", "floor": {"name": "First", "token_count": 3}}
    assert redact_for_log(record) == record


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_summarizes_long_geometry() -> None:
    coordinates = [[76.4081 + i * 1e-4, 9.9641] for i in range(20)]
    response = {"code": "Ok", "routes": [{"geometry": {"type": "LineString", "coordinates": coordinates}}]}

    redacted = redact_for_log(response, max_items=3)

    summary = redacted["routes"][0]["geometry"]["coordinates"]
    assert summary == [coordinates[0], "<18 points>", coordinates[-1]]
    assert redacted["code"] == "Ok"


def test_redact_for_log_keeps_short_geometry() -> None:
    coordinates = [[76.4081, 9.9641], [76.4085, 9.9648]]
    assert redact_for_log({"coordinates": coordinates}, max_items=3) == {"coordinates": coordinates}


def test_redact_for_log_cuts_other_long_lists() -> None:
    rooms = [{"id": i} for i in range(20)]
    redacted = redact_for_log(rooms, max_items=3)
    assert redacted[:3] == rooms[:3]
    assert redacted[-1] == "<+17 items>"
