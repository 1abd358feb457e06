"""HTMX partial route handlers for the event list and the event editor."""

from __future__ import annotations

from urllib.parse import urlencode

from fastapi import Depends, Form, HTTPException, Query, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from .config import settings
from .controller import Notification, PageController
from .editor import FIELD_NAMES, DraftInvitee, EventEditor, FormValues
from .listing import EventListView
from .schemas import SENTINEL_ID, Event
from .utils import viewer_zone
from .web import get_controller, get_service, is_htmx, templates

EVENTS_CHANGED = "events-changed"


def _no_cache(response: Response) -> Response:
    """Prevent clients from caching dynamic fragments so fresh data is shown."""
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    return response


async def editor_from_form(request: Request) -> EventEditor:
    """Rebuild the open editor from the fields the modal posts back."""
    form = await request.form()
    keys = form.getlist("invitee_key")
    ids = form.getlist("invitee_id")
    names = form.getlist("invitee_name")
    emails = form.getlist("invitee_email")
    if not len(keys) == len(ids) == len(names) == len(emails):
        raise HTTPException(status_code=400, detail="Invitee fields are incomplete")
    invitees = [
        DraftInvitee(name=name, email=email, id=invitee_id or SENTINEL_ID, key=key)
        for key, invitee_id, name, email in zip(keys, ids, names, emails)
    ]
    editor = EventEditor(tz=viewer_zone(str(form.get("tz", "")))).resume(
        event_id=str(form.get("event_id", "")) or None,
        values=FormValues(),
        invitees=invitees,
        new_invitee_name=str(form.get("newInviteeName", "")),
        new_invitee_email=str(form.get("newInviteeEmail", "")),
    )
    for name in FIELD_NAMES:
        editor.set_field(name, str(form.get(name, "")))
    return editor


def _render_modal(request: Request, editor: EventEditor):
    if not editor.is_open:
        return HTMLResponse("")
    return templates.TemplateResponse(
        request,
        "partials/event_modal.html",
        {"request": request, "editor": editor},
    )


def _render_notification(request: Request, notification: Notification):
    if not is_htmx(request):
        params = urlencode(
            {"message": notification.message, "message_class": notification.css_class}
        )
        return RedirectResponse(url=f"/?{params}", status_code=303)
    response = templates.TemplateResponse(
        request,
        "partials/notification.html",
        {
            "request": request,
            "notification": notification,
        },
    )
    response.headers["HX-Trigger"] = EVENTS_CHANGED
    return response


def events_list(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
    width: int | None = Query(None, ge=0),
    tz: str | None = Query(None),
):
    """Render one page of events in the layout and timezone of the viewer."""
    view = EventListView(service=get_service(request), tz=viewer_zone(tz))
    view.resize(width)
    view.change_page(page, page_size or settings.default_page_size)
    response = templates.TemplateResponse(
        request,
        "partials/event_list.html",
        {"request": request, "view": view},
    )
    return _no_cache(response)


def new_event_modal(request: Request, tz: str | None = Query(None)):
    controller = get_controller(request)
    controller.handle_add_new()
    return _render_modal(request, controller.editor(tz=viewer_zone(tz)))


def edit_event_modal(
    request: Request, record: str = Form(...), tz: str | None = Form(None)
):
    try:
        event = Event.model_validate_json(record)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid event record") from exc
    controller = get_controller(request)
    controller.handle_edit(event)
    return _render_modal(request, controller.editor(tz=viewer_zone(tz)))


def add_invitee(request: Request, editor: EventEditor = Depends(editor_from_form)):
    editor.add_invitee()
    return _render_modal(request, editor)


def remove_invitee(
    request: Request, key: str, editor: EventEditor = Depends(editor_from_form)
):
    editor.remove_invitee(key)
    return _render_modal(request, editor)


def close_modal(request: Request):
    editor = get_controller(request, modal_visible=True).editor()
    editor.cancel()
    return _render_modal(request, editor)


def submit_event(request: Request, editor: EventEditor = Depends(editor_from_form)):
    controller: PageController = get_controller(request, modal_visible=True)
    notifications: list[Notification] = []
    editor.on_submit = lambda event: notifications.append(controller.handle_submit(event))
    if editor.submit() is None:
        return _render_modal(request, editor)
    return _render_notification(request, notifications[0])


def delete_event(request: Request, event_id: str):
    controller = get_controller(request)
    notification = controller.handle_delete(event_id)
    return _render_notification(request, notification)


def register_partial_routes(app):
    """Register all partial and mutation routes on the FastAPI app."""
    app.get("/partials/events", response_class=HTMLResponse)(events_list)
    app.get("/partials/events/modal", response_class=HTMLResponse)(new_event_modal)
    app.post("/partials/events/modal", response_class=HTMLResponse)(edit_event_modal)
    app.get("/partials/events/modal/close", response_class=HTMLResponse)(close_modal)
    app.post("/partials/events/modal/invitees", response_class=HTMLResponse)(
        add_invitee
    )
    app.post(
        "/partials/events/modal/invitees/{key}/remove", response_class=HTMLResponse
    )(remove_invitee)

    app.post("/events/submit", response_class=HTMLResponse)(submit_event)
    app.post("/events/{event_id}/delete", response_class=HTMLResponse)(delete_event)
