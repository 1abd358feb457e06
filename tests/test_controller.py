from __future__ import annotations

from zoneinfo import ZoneInfo

from eventadmin.controller import PageController
from eventadmin.editor import ModalState
from eventadmin.schemas import SENTINEL_ID, Event


def _new_event() -> Event:
    return Event.model_validate(
        {
            "id": SENTINEL_ID,
            "name": "Hack Night",
            "startTime": "2025-06-01T18:00:00.000Z",
            "endTime": "2025-06-01T22:00:00.000Z",
            "venue": "Lab",
            "invites": [],
        }
    )


def test_add_new_and_edit_toggle_modal(service):
    controller = PageController(service=service)
    controller.handle_add_new()
    assert controller.modal_visible is True
    assert controller.current_event is None

    event = _new_event()
    controller.handle_edit(event)
    assert controller.current_event is event

    controller.handle_cancel()
    assert controller.modal_visible is False


def test_successful_submit_notifies_and_invalidates(service, store):
    controller = PageController(service=service)
    service.list_events(1, 10)
    controller.handle_edit(_new_event())

    notification = controller.handle_submit(_new_event())

    assert notification.level == "success"
    assert notification.message == "Event created successfully"
    assert notification.duration_seconds == 3
    assert controller.current_event is None
    service.list_events(1, 10)
    assert store.list_calls == 2


def test_rejected_mutation_still_invalidates(service, store):
    store.add()
    service.list_events(1, 10)
    store.reject_message = "Event is locked"
    controller = PageController(service=service)

    notification = controller.handle_delete(store.events[0]["id"])

    assert notification.level == "error"
    assert notification.message == "Event is locked"
    assert notification.duration_seconds == 5
    assert notification.css_class == "alert-danger"
    service.list_events(1, 10)
    assert store.list_calls == 2


def test_transport_failure_notifies_without_invalidating(service, store):
    service.list_events(1, 10)
    store.status_override = 502
    controller = PageController(service=service)

    notification = controller.handle_submit(_new_event())

    assert notification.level == "error"
    assert notification.message == "Request failed with status code 502"
    store.status_override = None
    service.list_events(1, 10)
    assert store.list_calls == 1


def test_editor_follows_modal_visibility(service):
    controller = PageController(service=service)
    assert controller.editor().modal_state is ModalState.CLOSED

    controller.handle_add_new()
    assert controller.editor().title == "Create Event"

    controller.handle_edit(_new_event().model_copy(update={"id": "evt-1"}))
    editor = controller.editor(tz=ZoneInfo("America/Los_Angeles"))
    assert editor.modal_state is ModalState.EDITING
    assert editor.values.start_time == "2025-06-01T11:00"


def test_cancelling_the_editor_hides_the_modal(service):
    controller = PageController(service=service)
    controller.handle_add_new()
    editor = controller.editor()
    editor.cancel()
    assert controller.modal_visible is False
    assert not editor.is_open


def test_submit_hides_modal_even_when_transport_fails(service, store):
    store.network_error = True
    controller = PageController(service=service, modal_visible=True)
    notification = controller.handle_submit(_new_event())
    assert notification.message == "Network Error"
    assert controller.modal_visible is False
