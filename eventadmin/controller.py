"""Page controller: modal visibility, the event being edited and notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Literal

from .client import TransportError
from .config import settings
from .editor import EventEditor
from .schemas import Envelope, Event
from .services import EventService

logger = logging.getLogger("uvicorn.error")

NotificationLevel = Literal["success", "error"]


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    duration_seconds: int

    @property
    def css_class(self) -> str:
        return "alert-success" if self.level == "success" else "alert-danger"


@dataclass
class PageController:
    service: EventService
    modal_visible: bool = False
    current_event: Event | None = None

    def handle_add_new(self) -> None:
        self.current_event = None
        self.modal_visible = True

    def handle_edit(self, event: Event) -> None:
        self.current_event = event
        self.modal_visible = True

    def handle_cancel(self) -> None:
        self.modal_visible = False

    def editor(self, *, tz: tzinfo | None = None) -> EventEditor:
        """Return the modal editor for the current page state.

        The editor is closed unless the modal is visible; cancelling it hides
        the modal again.
        """
        editor = EventEditor(on_cancel=self.handle_cancel, tz=tz)
        if self.modal_visible:
            editor.open(self.current_event)
        return editor

    def handle_submit(self, event: Event) -> Notification:
        try:
            response = self.service.create_update_event(event)
        except TransportError as exc:
            notification = self._transport_failure("save", exc)
        else:
            notification = self._after_mutation(response)
        self.modal_visible = False
        self.current_event = None
        return notification

    def handle_delete(self, event_id: str) -> Notification:
        try:
            response = self.service.delete_event(event_id)
        except TransportError as exc:
            return self._transport_failure("delete", exc)
        return self._after_mutation(response)

    def _after_mutation(self, response: Envelope) -> Notification:
        if response.success:
            notification = self.notify("success", response.message)
        else:
            logger.warning("Event service rejected mutation: %s", response.message)
            notification = self.notify("error", response.message)
        self.service.invalidate_events()
        return notification

    def _transport_failure(self, action: str, exc: TransportError) -> Notification:
        logger.warning("Failed to %s event: %s", action, exc.message)
        return self.notify("error", exc.message)

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        duration = (
            settings.success_notification_seconds
            if level == "success"
            else settings.error_notification_seconds
        )
        return Notification(level=level, message=message, duration_seconds=duration)
