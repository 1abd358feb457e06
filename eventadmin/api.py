"""FastAPI application for the event admin console."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version as pkg_version
from pathlib import Path
import tomllib

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .cache import QueryCache
from .client import ApiClient, TransportError
from .partials import register_partial_routes
from .services import EventService
from .web import is_htmx, register_web_routes, templates

# Use uvicorn's error logger so messages get the level prefix in the default log
# format.
logger = logging.getLogger("uvicorn.error")


def _load_app_version() -> str:
    """Return the current package version, falling back to pyproject for dev runs."""
    try:
        return pkg_version("event-admin")
    except PackageNotFoundError:
        pyproject_path = Path(__file__).resolve().parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            data = tomllib.loads(pyproject_path.read_text())
            project = data.get("project") or {}
            return str(project.get("version") or "dev")
    return "dev"


APP_VERSION = _load_app_version()


def build_service() -> EventService:
    """Create the event service with a fresh client and an app-scoped cache."""
    return EventService(ApiClient.from_settings(), QueryCache())


@asynccontextmanager
async def lifespan(app: FastAPI):
    service = build_service()
    app.state.event_service = service
    logger.info("Event admin console using %s", service.client.base_url)
    try:
        yield
    finally:
        service.close()


app = FastAPI(title="Event Admin", version=APP_VERSION, lifespan=lifespan)
static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

templates.env.globals["app_version"] = APP_VERSION

register_web_routes(app)
register_partial_routes(app)


def _wants_json(request: Request) -> bool:
    accept = (request.headers.get("accept") or "").lower()
    return "application/json" in accept and "text/html" not in accept


def _render_error(request: Request, status_code: int, message: str | None):
    """Return an error in the shape the caller can display.

    HTMX swaps get a plain-text body that the page shows as a toast, so a
    failed partial never replaces the list or the modal with a full page.
    """
    message = message or "Something went wrong."
    if is_htmx(request):
        return PlainTextResponse(message, status_code=status_code)
    return templates.TemplateResponse(
        request,
        "error.html",
        {"request": request, "status_code": status_code, "error_message": message},
        status_code=status_code,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if _wants_json(request):
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)
    detail = exc.detail if isinstance(exc.detail, str) else None
    return _render_error(request, exc.status_code, detail)


@app.exception_handler(TransportError)
async def transport_error_handler(request: Request, exc: TransportError):
    logger.error(
        "Event service unavailable while handling %s %s: %s",
        request.method,
        request.url.path,
        exc.message,
    )
    detail = "The event service is unavailable at the moment. Please try again."
    if _wants_json(request):
        return JSONResponse({"detail": detail}, status_code=502)
    return _render_error(request, 502, detail)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    if _wants_json(request):
        return JSONResponse({"detail": exc.errors()}, status_code=422)
    fields = sorted({str(error["loc"][-1]) for error in exc.errors() if error.get("loc")})
    message = "Invalid request parameters"
    if fields:
        message = f"{message}: {', '.join(fields)}"
    return _render_error(request, 422, message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error while handling %s %s", request.method, request.url.path
    )
    if _wants_json(request):
        return JSONResponse({"detail": "Internal server error"}, status_code=500)
    return _render_error(request, 500, "The console hit an unexpected error.")


@app.get("/healthz", include_in_schema=False)
def healthz():
    return {"status": "ok", "version": APP_VERSION}
