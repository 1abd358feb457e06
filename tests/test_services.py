from __future__ import annotations

import json

import pytest

from eventadmin.client import TransportError
from eventadmin.schemas import SENTINEL_ID, Event, Invitee


def _event(**overrides) -> Event:
    data = {
        "id": SENTINEL_ID,
        "name": "Board Meeting",
        "startTime": "2025-02-01T09:00:00.000Z",
        "endTime": "2025-02-01T10:00:00.000Z",
        "venue": "Room 4",
        "invites": [{"id": SENTINEL_ID, "name": "Ada", "email": "ada@example.com"}],
    }
    data.update(overrides)
    return Event.model_validate(data)


def test_list_events_caches_per_page_and_size(service, store):
    for index in range(12):
        store.add(name=f"Event {index}")

    first = service.list_events(1, 10)
    again = service.list_events(1, 10)
    second = service.list_events(2, 10)
    bigger = service.list_events(1, 20)

    assert first is again
    assert store.list_calls == 3
    assert [e.name for e in second.result.data] == ["Event 10", "Event 11"]
    assert bigger.result.total_records == 12
    assert len(bigger.result.data) == 12


def test_invalidate_events_forces_refetch(service, store):
    store.add()
    service.list_events(1, 10)
    service.invalidate_events()
    service.list_events(1, 10)
    assert store.list_calls == 2


def test_create_sends_sentinel_and_update_sends_real_id(service, store):
    created = service.create_update_event(_event())
    assert created.success is True
    assert created.message == "Event created successfully"
    sent = json.loads(store.requests[-1].content)
    assert sent["id"] == SENTINEL_ID
    assert sent["startTime"] == "2025-02-01T09:00:00.000Z"
    assert sent["invites"][0]["email"] == "ada@example.com"

    updated = service.create_update_event(_event(id=created.result, name="Renamed"))
    assert updated.message == "Event updated successfully"
    assert json.loads(store.requests[-1].content)["id"] == created.result
    assert [e["name"] for e in store.events] == ["Renamed"]


def test_mutations_do_not_invalidate_by_themselves(service, store):
    store.add()
    service.list_events(1, 10)
    service.create_update_event(_event())
    service.list_events(1, 10)
    assert store.list_calls == 1


def test_delete_posts_identifier(service, store):
    event = store.add()
    response = service.delete_event(event["id"])
    assert response.success is True
    assert response.result.id == event["id"]
    assert json.loads(store.requests[-1].content) == {"id": event["id"]}
    assert store.events == []


def test_application_failure_is_returned_not_raised(service, store):
    store.reject_message = "Venue is double-booked"
    response = service.create_update_event(_event())
    assert response.success is False
    assert response.message == "Venue is double-booked"


def test_malformed_envelope_becomes_transport_error(service, api_client, monkeypatch):
    monkeypatch.setattr(api_client, "get_request", lambda *_: {"unexpected": True})
    with pytest.raises(TransportError):
        service.list_events(1, 10)


def test_event_wire_shape_uses_camel_case():
    wire = Event(
        id=None,
        name="Offsite",
        start_time="a",
        end_time="b",
        venue="Lake",
        invites=[Invitee(name="Bo", email="bo@example.com")],
    ).to_wire()
    assert "id" not in wire
    assert wire["startTime"] == "a" and wire["endTime"] == "b"
    assert wire["invites"][0]["id"] == SENTINEL_ID
