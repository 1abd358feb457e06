"""Shared pytest fixtures for the event admin console."""

from __future__ import annotations

import json
import sys
import uuid
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from eventadmin import api
from eventadmin.cache import QueryCache
from eventadmin.client import ApiClient
from eventadmin.schemas import SENTINEL_ID
from eventadmin.services import EventService

BASE_URL = "http://events.test/api"
TENANT_ID = "tenant-test"


class FakeEventStore:
    """In-memory stand-in for the remote event API.

    Speaks the same envelope format as the real service and records every
    request it receives.
    """

    def __init__(self):
        self.events: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.reject_message: str | None = None
        self.status_override: int | None = None
        self.network_error = False

    def add(self, name: str = "Launch Party", **overrides) -> dict:
        event = {
            "id": str(uuid.uuid4()),
            "name": name,
            "startTime": "2025-01-05T15:05:00.000Z",
            "endTime": "2025-01-05T17:30:00.000Z",
            "venue": "HQ",
            "invites": [],
        }
        event.update(overrides)
        self.events.append(event)
        return event

    def count(self, method: str, suffix: str) -> int:
        return sum(
            1
            for request in self.requests
            if request.method == method and request.url.path.endswith(suffix)
        )

    @property
    def list_calls(self) -> int:
        return self.count("GET", "/event/")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_error:
            raise httpx.ConnectError("Network Error", request=request)
        if self.status_override:
            return httpx.Response(self.status_override, json={"detail": "boom"})
        path = request.url.path
        if request.method == "GET" and path.endswith("/event/"):
            return self._list(request)
        if request.method == "POST" and path.endswith("/event/createUpdate"):
            return self._create_update(json.loads(request.content))
        if request.method == "POST" and path.endswith("/event/delete"):
            return self._delete(json.loads(request.content))
        return httpx.Response(404, json={"detail": "Not found"})

    def _list(self, request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("pageNumber", "1"))
        size = int(request.url.params.get("pageSize", "10"))
        data = self.events[(page - 1) * size : page * size]
        return httpx.Response(
            200,
            json={
                "success": True,
                "message": "",
                "result": {
                    "data": data,
                    "totalRecords": len(self.events),
                    "pageNumber": page,
                    "pageSize": size,
                },
            },
        )

    def _create_update(self, payload: dict) -> httpx.Response:
        if self.reject_message:
            return httpx.Response(
                200,
                json={"success": False, "message": self.reject_message, "result": None},
            )
        for invitee in payload.get("invites", []):
            if invitee.get("id") in (None, SENTINEL_ID):
                invitee["id"] = str(uuid.uuid4())
        if payload.get("id") in (None, SENTINEL_ID):
            payload["id"] = str(uuid.uuid4())
            self.events.append(payload)
            message = "Event created successfully"
        else:
            self.events = [
                payload if event["id"] == payload["id"] else event
                for event in self.events
            ]
            message = "Event updated successfully"
        return httpx.Response(
            200, json={"success": True, "message": message, "result": payload["id"]}
        )

    def _delete(self, payload: dict) -> httpx.Response:
        if self.reject_message:
            return httpx.Response(
                200,
                json={"success": False, "message": self.reject_message, "result": None},
            )
        self.events = [event for event in self.events if event["id"] != payload["id"]]
        return httpx.Response(
            200,
            json={
                "success": True,
                "message": "Event deleted successfully",
                "result": {"id": payload["id"]},
            },
        )


@pytest.fixture()
def store() -> FakeEventStore:
    return FakeEventStore()


@pytest.fixture()
def api_client(store):
    client = ApiClient(
        BASE_URL,
        TENANT_ID,
        auxiliary_header=("myheader", "123ABC"),
        transport=httpx.MockTransport(store.handler),
    )
    try:
        yield client
    finally:
        client.close()


@pytest.fixture()
def service(api_client) -> EventService:
    return EventService(api_client, QueryCache())


@pytest.fixture()
def client(monkeypatch, service):
    """FastAPI test client talking to the in-memory event store."""

    monkeypatch.setattr(api, "build_service", lambda: service)
    with TestClient(api.app) as test_client:
        yield test_client
