"""View model for the paged event list."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from enum import Enum

from .client import TransportError
from .config import settings
from .schemas import Event, ListEventsResponse
from .services import EventService
from .utils import format_date, normalize_iso

logger = logging.getLogger("uvicorn.error")

PAGE_SIZE_OPTIONS = (10, 20, 50, 100)


class Layout(str, Enum):
    TABULAR = "tabular"
    STACKED = "stacked"


class ListState(str, Enum):
    LOADING = "loading"
    DISPLAYING = "displaying"


def select_layout(width: int | None, breakpoint: int | None = None) -> Layout:
    """Pick the column layout for a viewport ``width`` in logical pixels.

    An unknown width is treated as a desktop viewport.
    """
    threshold = settings.desktop_breakpoint if breakpoint is None else breakpoint
    if width is None or width >= threshold:
        return Layout.TABULAR
    return Layout.STACKED


def _normalize_event(event: Event, tz: tzinfo | None = None) -> Event:
    updates = {}
    for attr in ("start_time", "end_time"):
        try:
            updates[attr] = normalize_iso(getattr(event, attr), tz=tz)
        except ValueError:
            logger.debug("Leaving unparseable %s on event %s", attr, event.id)
    return event.model_copy(update=updates, deep=True)


def invitee_summary(event: Event, layout: Layout = Layout.TABULAR) -> str:
    count = len(event.invites)
    if not count:
        return "No invitees"
    if layout is Layout.STACKED:
        return f"{count} {'invitee' if count == 1 else 'invitees'}"
    return f"{count} {'person' if count == 1 else 'people'}"


@dataclass
class EventRow:
    event: Event
    layout: Layout
    tz: tzinfo | None = None

    @property
    def id(self) -> str | None:
        return self.event.id

    @property
    def start_date(self) -> str:
        return format_date(self.event.start_time, tz=self.tz)

    @property
    def start_clock(self) -> str:
        return format_date(self.event.start_time, True, tz=self.tz)

    @property
    def end_date(self) -> str:
        return format_date(self.event.end_time, tz=self.tz)

    @property
    def end_clock(self) -> str:
        return format_date(self.event.end_time, True, tz=self.tz)

    @property
    def invitee_summary(self) -> str:
        return invitee_summary(self.event, self.layout)

    @property
    def invitee_names(self) -> str:
        return ", ".join(invitee.name for invitee in self.event.invites)

    @property
    def record_json(self) -> str:
        return self.event.model_dump_json(by_alias=True)


@dataclass
class EventListView:
    """Pagination cursor plus the rendered copy of the current page.

    Edit and delete affordances only emit the record or its id; mutations
    belong to the page controller.
    """

    service: EventService
    page: int = 1
    page_size: int = field(default_factory=lambda: settings.default_page_size)
    width: int | None = None
    tz: tzinfo | None = None
    state: ListState = ListState.LOADING
    events: list[Event] = field(default_factory=list)
    total_records: int = 0
    error: str | None = None

    @property
    def layout(self) -> Layout:
        return select_layout(self.width)

    def load(self) -> "EventListView":
        self.state = ListState.LOADING
        self._fetch()
        last_page = self.total_pages
        if not self.events and self.total_records and self.page > last_page:
            logger.info(
                "Page %s is past the last page %s; clamping", self.page, last_page
            )
            self.page = last_page
            self._fetch()
        self.state = ListState.DISPLAYING
        return self

    def change_page(self, page: int, page_size: int | None = None) -> "EventListView":
        self.page = max(1, page)
        if page_size:
            self.page_size = page_size
        return self.load()

    def resize(self, width: int | None) -> Layout:
        self.width = width
        return self.layout

    def _fetch(self) -> None:
        try:
            response = self.service.list_events(self.page, self.page_size)
        except TransportError as exc:
            logger.warning("Failed to load events page %s: %s", self.page, exc.message)
            self.error = exc.message
            return
        self.apply_response(response)

    def apply_response(self, response: ListEventsResponse) -> None:
        if not response.success or response.result is None:
            self.error = response.message or "Unable to load events."
            return
        self.error = None
        self.events = [
            _normalize_event(event, self.tz) for event in response.result.data
        ]
        self.total_records = response.result.total_records

    @property
    def is_empty(self) -> bool:
        return not self.events

    @property
    def rows(self) -> list[EventRow]:
        layout = self.layout
        return [
            EventRow(event=event, layout=layout, tz=self.tz) for event in self.events
        ]

    @property
    def total_pages(self) -> int:
        if not self.total_records:
            return 1
        return max(1, (self.total_records + self.page_size - 1) // self.page_size)

    @property
    def range_start(self) -> int:
        if not self.total_records:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def range_end(self) -> int:
        return min(self.page * self.page_size, self.total_records)

    @property
    def range_text(self) -> str:
        return (
            f"Showing {self.range_start} to {self.range_end} "
            f"of {self.total_records} events"
        )

    @property
    def page_numbers(self) -> list[int]:
        return list(range(1, self.total_pages + 1))

    @property
    def page_size_options(self) -> tuple[int, ...]:
        if self.page_size in PAGE_SIZE_OPTIONS:
            return PAGE_SIZE_OPTIONS
        return tuple(sorted({*PAGE_SIZE_OPTIONS, self.page_size}))

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
