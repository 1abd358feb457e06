"""Data access for events: paged listing, create-or-update and delete."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .cache import QueryCache
from .client import ENDPOINTS, ApiClient, TransportError
from .schemas import (
    CreateUpdateEventResponse,
    DeleteEventResponse,
    Event,
    ListEventsResponse,
)

logger = logging.getLogger("uvicorn.error")

EVENTS_QUERY_KEY = "events"

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


def _parse(model: type[ResponseModel], body: Any) -> ResponseModel:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        logger.warning("Malformed %s from event service: %s", model.__name__, exc)
        raise TransportError("Unexpected response from the event service") from exc


class EventService:
    """Bind the API client to the query cache for the three event operations."""

    def __init__(self, client: ApiClient, cache: QueryCache | None = None):
        self.client = client
        self.cache = cache if cache is not None else QueryCache()

    def list_events(self, page_number: int, page_size: int) -> ListEventsResponse:
        key = (EVENTS_QUERY_KEY, page_number, page_size)
        return self.cache.fetch(
            key, lambda: self._load_events(page_number, page_size)
        )

    def _load_events(self, page_number: int, page_size: int) -> ListEventsResponse:
        body = self.client.get_request(
            ENDPOINTS["event"]["get_events"],
            f"pageNumber={page_number}&pageSize={page_size}",
        )
        return _parse(ListEventsResponse, body)

    def create_update_event(self, event: Event) -> CreateUpdateEventResponse:
        body = self.client.post_request(
            ENDPOINTS["event"]["create_update"], event.to_wire()
        )
        return _parse(CreateUpdateEventResponse, body)

    def delete_event(self, event_id: str) -> DeleteEventResponse:
        body = self.client.post_request(
            ENDPOINTS["event"]["delete_event"], {"id": event_id}
        )
        return _parse(DeleteEventResponse, body)

    def invalidate_events(self) -> int:
        return self.cache.invalidate((EVENTS_QUERY_KEY,))

    def close(self) -> None:
        self.cache.clear()
        self.client.close()
