"""Wire models for the remote event API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SENTINEL_ID = "00000000-0000-0000-0000-000000000000"


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Invitee(WireModel):
    id: str = SENTINEL_ID
    name: str
    email: str


class Event(WireModel):
    id: str | None = None
    name: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    venue: str
    invites: list[Invitee] = Field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return is_sentinel(self.id)


class EventPage(WireModel):
    data: list[Event] = Field(default_factory=list)
    total_records: int = Field(0, alias="totalRecords")
    page_number: int = Field(1, alias="pageNumber")
    page_size: int = Field(10, alias="pageSize")


class Envelope(WireModel):
    success: bool
    message: str = ""


class ListEventsResponse(Envelope):
    result: EventPage | None = None


class CreateUpdateEventResponse(Envelope):
    result: str | None = None


class DeleteResult(WireModel):
    id: str


class DeleteEventResponse(Envelope):
    result: DeleteResult | None = None


def is_sentinel(identifier: str | None) -> bool:
    return not identifier or identifier == SENTINEL_ID
