"""Event editor: modal state, form validation and invitee editing."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import tzinfo
from enum import Enum
from typing import Callable, Iterable

from .config import settings
from .schemas import SENTINEL_ID, Event, Invitee, is_sentinel
from .utils import from_local_input, parse_timestamp, to_local_input

EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)

FIELD_NAMES = ("eventName", "venue", "startTime", "endTime")


class ModalState(str, Enum):
    CLOSED = "closed"
    CREATING = "creating"
    EDITING = "editing"
    SUBMITTING = "submitting"


class FormState(str, Enum):
    PRISTINE = "pristine"
    TOUCHED = "touched"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class FormValues:
    event_name: str = ""
    start_time: str = ""
    end_time: str = ""
    venue: str = ""

    @classmethod
    def from_event(cls, event: Event | None, *, tz: tzinfo | None = None) -> "FormValues":
        if event is None:
            return cls()
        return cls(
            event_name=event.name or "",
            start_time=to_local_input(event.start_time, tz=tz),
            end_time=to_local_input(event.end_time, tz=tz),
            venue=event.venue or "",
        )


_ATTRS = {
    "eventName": "event_name",
    "venue": "venue",
    "startTime": "start_time",
    "endTime": "end_time",
}


@dataclass
class DraftInvitee:
    """An invitee held in the editor before submission.

    ``key`` identifies the entry locally: the server id for saved invitees and
    a generated token for new ones, which all share the sentinel id.
    """

    name: str
    email: str
    id: str = SENTINEL_ID
    key: str = ""

    def __post_init__(self):
        if not self.key:
            self.key = self.id if not is_sentinel(self.id) else uuid.uuid4().hex

    @classmethod
    def from_invitee(cls, invitee: Invitee) -> "DraftInvitee":
        return cls(name=invitee.name, email=invitee.email, id=invitee.id)

    def to_invitee(self) -> Invitee:
        return Invitee(id=self.id, name=self.name, email=self.email)


@dataclass
class EventEditor:
    on_submit: Callable[[Event], None] | None = None
    on_cancel: Callable[[], None] | None = None
    tz: tzinfo | None = None
    enforce_end_after_start: bool = field(
        default_factory=lambda: settings.enforce_end_after_start
    )
    modal_state: ModalState = ModalState.CLOSED
    form_state: FormState = FormState.PRISTINE
    event_id: str | None = None
    values: FormValues = field(default_factory=FormValues)
    invitees: list[DraftInvitee] = field(default_factory=list)
    new_invitee_name: str = ""
    new_invitee_email: str = ""
    errors: dict[str, str] = field(default_factory=dict)
    invitee_errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_open(self) -> bool:
        return self.modal_state is not ModalState.CLOSED

    @property
    def is_editing(self) -> bool:
        return not is_sentinel(self.event_id)

    @property
    def title(self) -> str:
        return "Edit Event" if self.is_editing else "Create Event"

    @property
    def submit_label(self) -> str:
        return "Save Changes" if self.is_editing else "Add Event"

    def open(self, event: Event | None = None) -> "EventEditor":
        self._reset()
        if event is not None:
            self.event_id = event.id
            self.values = FormValues.from_event(event, tz=self.tz)
            self.invitees = [DraftInvitee.from_invitee(i) for i in event.invites]
        self.modal_state = ModalState.EDITING if self.is_editing else ModalState.CREATING
        return self

    def resume(
        self,
        *,
        event_id: str | None,
        values: FormValues,
        invitees: Iterable[DraftInvitee],
        new_invitee_name: str = "",
        new_invitee_email: str = "",
    ) -> "EventEditor":
        """Rebuild an open editor from state carried across requests."""
        self._reset()
        self.event_id = None if is_sentinel(event_id) else event_id
        self.values = values
        self.invitees = list(invitees)
        self.new_invitee_name = new_invitee_name
        self.new_invitee_email = new_invitee_email
        self.modal_state = ModalState.EDITING if self.is_editing else ModalState.CREATING
        self.form_state = FormState.TOUCHED
        return self

    def close(self) -> None:
        self._reset()
        self.modal_state = ModalState.CLOSED

    def cancel(self) -> None:
        if self.on_cancel is not None:
            self.on_cancel()
        self.close()

    def _reset(self) -> None:
        self.form_state = FormState.PRISTINE
        self.event_id = None
        self.values = FormValues()
        self.invitees = []
        self.new_invitee_name = ""
        self.new_invitee_email = ""
        self.errors = {}
        self.invitee_errors = {}

    def set_field(self, name: str, value: str) -> None:
        if name not in _ATTRS:
            raise KeyError(name)
        setattr(self.values, _ATTRS[name], value)
        self.form_state = FormState.TOUCHED

    # Invitees

    def validate_invitee(self) -> bool:
        errors: dict[str, str] = {}
        if not self.new_invitee_name.strip():
            errors["name"] = "Name is required"
        if not self.new_invitee_email.strip():
            errors["email"] = "Email is required"
        elif not EMAIL_PATTERN.fullmatch(self.new_invitee_email):
            errors["email"] = "Invalid email address"
        self.invitee_errors = errors
        return not errors

    def add_invitee(self, name: str | None = None, email: str | None = None) -> bool:
        if name is not None:
            self.new_invitee_name = name
        if email is not None:
            self.new_invitee_email = email
        if not self.validate_invitee():
            return False
        wanted = self.new_invitee_email.lower()
        if any(invitee.email.lower() == wanted for invitee in self.invitees):
            self.invitee_errors = {"email": "This email has already been invited."}
            return False
        self.invitees.append(
            DraftInvitee(name=self.new_invitee_name, email=self.new_invitee_email)
        )
        self.new_invitee_name = ""
        self.new_invitee_email = ""
        self.invitee_errors = {}
        return True

    def remove_invitee(self, key: str) -> None:
        self.invitees = [invitee for invitee in self.invitees if invitee.key != key]

    # Submission

    def validate(self) -> dict[str, str]:
        self.form_state = FormState.VALIDATING
        errors: dict[str, str] = {}
        if not self.values.event_name.strip():
            errors["eventName"] = "Event name is required"
        if not self.values.venue.strip():
            errors["venue"] = "Event venue is required"
        start = end = None
        if not self.values.start_time.strip():
            errors["startTime"] = "Start time is required"
        else:
            start = parse_timestamp(self.values.start_time, tz=self.tz)
            if start is None:
                errors["startTime"] = "Start time is invalid"
        if not self.values.end_time.strip():
            errors["endTime"] = "End time is required"
        else:
            end = parse_timestamp(self.values.end_time, tz=self.tz)
            if end is None:
                errors["endTime"] = "End time is invalid"
        if self.enforce_end_after_start and start and end and end <= start:
            errors["endTime"] = "End time must be after the start time."
        self.errors = errors
        self.form_state = FormState.INVALID if errors else FormState.VALID
        return errors

    def build_event(self) -> Event:
        return Event(
            id=self.event_id if self.is_editing else SENTINEL_ID,
            name=self.values.event_name,
            start_time=from_local_input(self.values.start_time, tz=self.tz),
            end_time=from_local_input(self.values.end_time, tz=self.tz),
            venue=self.values.venue,
            invites=[invitee.to_invitee() for invitee in self.invitees],
        )

    def submit(self) -> Event | None:
        """Validate and hand the assembled event to ``on_submit``.

        Returns ``None`` and keeps the editor open when validation fails.
        """
        if not self.is_open:
            raise RuntimeError("Cannot submit a closed editor")
        if self.validate():
            return None
        self.modal_state = ModalState.SUBMITTING
        event = self.build_event()
        if self.on_submit is not None:
            self.on_submit(event)
        self.close()
        return event
