from __future__ import annotations

import json

import httpx
import pytest

from eventadmin.client import ENDPOINTS, ApiClient, TransportError


def test_get_request_sends_fixed_headers_and_query(api_client, store):
    body = api_client.get_request(
        ENDPOINTS["event"]["get_events"], "pageNumber=2&pageSize=5"
    )
    assert body["success"] is True

    request = store.requests[-1]
    assert str(request.url) == "http://events.test/api/event/?pageNumber=2&pageSize=5"
    assert request.headers["X-Tenant-ID"] == "tenant-test"
    assert request.headers["myheader"] == "123ABC"
    assert request.headers["Content-Type"] == "application/json"


def test_post_request_serializes_payload(api_client, store):
    store.add(name="Doomed")
    event_id = store.events[0]["id"]
    body = api_client.post_request(ENDPOINTS["event"]["delete_event"], {"id": event_id})
    assert body["result"] == {"id": event_id}

    request = store.requests[-1]
    assert request.method == "POST"
    assert json.loads(request.content) == {"id": event_id}


def test_non_2xx_raises_transport_error(api_client, store):
    store.status_override = 503
    with pytest.raises(TransportError) as excinfo:
        api_client.get_request(ENDPOINTS["event"]["get_events"], "pageNumber=1")
    assert excinfo.value.status_code == 503
    assert "503" in excinfo.value.message


def test_network_failure_raises_transport_error(api_client, store):
    store.network_error = True
    with pytest.raises(TransportError) as excinfo:
        api_client.post_request(ENDPOINTS["event"]["create_update"], {})
    assert excinfo.value.status_code is None
    assert excinfo.value.message == "Network Error"


def test_non_json_body_raises_transport_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
    client = ApiClient("http://events.test/api", "t", transport=transport)
    try:
        with pytest.raises(TransportError):
            client.get_request("/event/")
    finally:
        client.close()
