"""HTTP client for the remote event API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import settings

logger = logging.getLogger("uvicorn.error")

ENDPOINTS = {
    "event": {
        "get_events": "/event/",
        "create_update": "/event/createUpdate",
        "delete_event": "/event/delete",
    },
}


class TransportError(Exception):
    """Raised when the remote API cannot be reached or answers with non-2xx."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:
    """Thin wrapper adding the base URL, tenant and fixed headers to every call."""

    def __init__(
        self,
        base_url: str,
        tenant_id: str,
        *,
        auxiliary_header: tuple[str, str] = ("myheader", "123ABC"),
        transport: httpx.BaseTransport | None = None,
    ):
        name, value = auxiliary_header
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Content-Type": "application/json",
                "X-Tenant-ID": tenant_id,
                name: value,
            },
            transport=transport,
        )

    @classmethod
    def from_settings(cls, *, transport: httpx.BaseTransport | None = None) -> "ApiClient":
        return cls(
            settings.base_url,
            settings.tenant_id,
            auxiliary_header=settings.auxiliary_header,
            transport=transport,
        )

    def get_request(self, endpoint: str, query: str = "") -> Any:
        url = f"{endpoint}?{query}" if query else endpoint
        return self._send("GET", url)

    def post_request(self, endpoint: str, payload: Any) -> Any:
        return self._send("POST", endpoint, json=payload)

    def _send(self, method: str, url: str, **kwargs) -> Any:
        logger.debug("Remote API %s %s", method, url)
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TransportError(
                f"Request failed with status code {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or "Network Error") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                "Unexpected response from the event service",
                status_code=response.status_code,
            ) from exc

    def close(self) -> None:
        self._client.close()
