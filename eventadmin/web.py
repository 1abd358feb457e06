"""Template setup and full-page route handlers for the event admin console."""

from __future__ import annotations

from pathlib import Path

from fastapi import Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .config import settings
from .controller import PageController
from .listing import PAGE_SIZE_OPTIONS
from .services import EventService

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")


def get_service(request: Request) -> EventService:
    return request.app.state.event_service


def get_controller(request: Request, *, modal_visible: bool = False) -> PageController:
    """Rebuild the page controller for one request.

    Routes posted from inside the modal pass ``modal_visible=True``.
    """
    return PageController(service=get_service(request), modal_visible=modal_visible)


def is_htmx(request: Request) -> bool:
    return request.headers.get("hx-request", "").lower() == "true"


def events_page(
    request: Request,
    message: str | None = Query(None),
    message_class: str = Query("alert-success"),
):
    """Render the events page shell; the list and modal load as partials."""
    return templates.TemplateResponse(
        request,
        "events.html",
        {
            "request": request,
            "page": 1,
            "page_size": settings.default_page_size,
            "page_size_options": PAGE_SIZE_OPTIONS,
            "message": message,
            "message_class": message_class,
        },
    )


def register_web_routes(app):
    """Register full-page routes on the FastAPI app."""
    app.get("/", response_class=HTMLResponse)(events_page)
