"""Typer CLI for the event admin console."""

from __future__ import annotations

import json
import os
import shutil
import subprocess
import sys
from pathlib import Path

import typer
import uvicorn

from .cache import QueryCache
from .client import ApiClient, TransportError
from .config import (
    load_settings,
    settings,
    settings_as_dict,
    update_config_file,
)
from .listing import EventListView
from .seed import seed_fake_events
from .services import EventService
from .utils import viewer_zone

app = typer.Typer(help="Event admin console command-line interface")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _service() -> EventService:
    return EventService(ApiClient.from_settings(), QueryCache())


def _fail(message: str) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.command("runserver")
def runserver(
    host: str = typer.Option(settings.app_host, "--host", help="Host to bind"),
    port: int = typer.Option(settings.app_port, "--port", help="Port to bind"),
):
    """Start the admin console with uvicorn."""
    config = uvicorn.Config(
        "eventadmin.api:app",
        host=host,
        port=port,
        reload=False,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
    server = uvicorn.Server(config)
    typer.echo(f"Starting event admin on {host}:{port} -> {settings.base_url}")
    server.run()


@app.command("events")
def list_events(
    page: int = typer.Option(1, "--page", min=1, help="Page number (1-based)"),
    page_size: int = typer.Option(
        settings.default_page_size, "--page-size", min=1, help="Events per page"
    ),
    tz: str | None = typer.Option(
        None, "--tz", help="IANA timezone for displayed times (default: display_timezone)"
    ),
) -> None:
    """Print one page of events from the remote event service.

    A page past the end shows the last page instead.
    """
    service = _service()
    try:
        view = EventListView(service=service, tz=viewer_zone(tz)).change_page(
            page, page_size
        )
    finally:
        service.close()

    if view.error:
        _fail(f"Unable to load events: {view.error}")
    if view.is_empty:
        typer.echo("No Events Found")
        return
    for row in view.rows:
        typer.echo(
            f"{row.id}  {row.event.name}  {row.start_date} {row.start_clock}"
            f" - {row.end_date} {row.end_clock}"
            f"  @ {row.event.venue}  ({row.invitee_summary})"
        )
    typer.echo(view.range_text)


@app.command("delete-event")
def delete_event(event_id: str = typer.Argument(..., help="Event identifier")) -> None:
    """Delete an event on the remote event service."""
    service = _service()
    try:
        response = service.delete_event(event_id)
    except TransportError as exc:
        _fail(f"Unable to reach the event service: {exc.message}")
    finally:
        service.close()
    if not response.success:
        _fail(response.message or "Delete failed.")
    typer.secho(response.message or "Event deleted.", fg=typer.colors.GREEN)


@app.command("seed-events")
def seed_events(
    count: int = typer.Option(
        settings.seed_events, "--count", min=0, help="Number of events to create"
    ),
    max_invitees: int = typer.Option(
        settings.seed_invitees_per_event,
        "--max-invitees",
        min=0,
        help="Maximum invitees to attach to each event",
    ),
) -> None:
    """Create fake events on the remote event service."""
    service = _service()
    try:
        stats = seed_fake_events(
            service, event_count=count, max_invitees_per_event=max_invitees
        )
    except TransportError as exc:
        _fail(f"Unable to reach the event service: {exc.message}")
    finally:
        service.close()
    typer.echo(
        f"Seeded {stats['events']} events with {stats['invitees']} invitees"
        f" ({stats['rejected']} rejected)."
    )


@app.command("config")
def configure(
    show: bool = typer.Option(
        False, "--show", help="Show the current effective configuration"
    ),
    base_url: str | None = typer.Option(
        None, "--base-url", help="Base URL of the remote event API"
    ),
    tenant_id: str | None = typer.Option(
        None, "--tenant-id", help="Tenant identifier sent as X-Tenant-ID"
    ),
    display_timezone: str | None = typer.Option(
        None, "--display-timezone", help="IANA timezone used to show and edit times"
    ),
    default_page_size: int | None = typer.Option(
        None, "--default-page-size", min=1, help="Initial events per page"
    ),
    desktop_breakpoint: int | None = typer.Option(
        None,
        "--desktop-breakpoint",
        min=0,
        help="Viewport width at which the tabular layout is used",
    ),
    enforce_end_after_start: bool | None = typer.Option(
        None,
        "--enforce-end-after-start/--no-enforce-end-after-start",
        help="Reject events whose end time is not after the start time",
    ),
    host: str | None = typer.Option(None, "--host", help="Default host for runserver"),
    port: int | None = typer.Option(None, "--port", help="Default port for runserver"),
    config_path: Path | None = typer.Option(
        None,
        "--config-path",
        help="Path to eventadmin.toml (default: ./eventadmin.toml)",
    ),
):
    """View or update the persistent configuration file.

    Changes apply the next time the console starts.
    """

    updates = {
        "base_url": base_url,
        "tenant_id": tenant_id,
        "display_timezone": display_timezone,
        "default_page_size": default_page_size,
        "desktop_breakpoint": desktop_breakpoint,
        "enforce_end_after_start": enforce_end_after_start,
        "app_host": host,
        "app_port": port,
    }
    clean_updates = {k: v for k, v in updates.items() if v is not None}

    target_path = config_path or settings.config_path
    if clean_updates:
        settings_ref = update_config_file(clean_updates, path=target_path)
        typer.echo(f"Updated configuration in {target_path}")
    else:
        settings_ref = load_settings(target_path)
    if show or not clean_updates:
        effective = settings_as_dict(settings_ref)
        effective["config_path"] = str(target_path)
        typer.echo(json.dumps(effective, indent=2))


@app.command("test")
def run_tests(pytest_args: list[str] = typer.Argument(None, help="Extra pytest args")):
    """Run the test suite with helpful defaults."""
    env = os.environ.copy()
    env.setdefault("PYTHONPATH", ".")
    env.setdefault("UV_CACHE_DIR", ".uv-cache")
    uv_path = shutil.which("uv")
    if uv_path:
        cmd = [uv_path, "run", "pytest"]
    else:
        typer.echo("uv not found, falling back to python -m pytest")
        cmd = [sys.executable, "-m", "pytest"]
    if pytest_args:
        cmd.extend(pytest_args)
    typer.echo(f"Running tests: {' '.join(cmd)}")
    result = subprocess.run(cmd, env=env)
    raise typer.Exit(code=result.returncode)


if __name__ == "__main__":
    app()
