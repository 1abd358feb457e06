"""Date helpers for the event admin console."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import settings

logger = logging.getLogger("uvicorn.error")

INVALID_DATE = "Invalid date"
LOCAL_INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def utcnow() -> datetime:
    """Return a naive UTC datetime."""

    return datetime.now(UTC).replace(tzinfo=None)


def display_zone(name: str | None = None) -> tzinfo:
    """Return the named timezone, defaulting to the configured display zone."""
    zone_name = name or settings.display_timezone
    if zone_name.upper() == "UTC":
        return UTC
    return ZoneInfo(zone_name)


def viewer_zone(name: str | None) -> tzinfo:
    """Return the browser-reported zone, or the configured one when it is unusable."""
    if name:
        try:
            return display_zone(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                "Unknown viewer timezone %r; using %s", name, settings.display_timezone
            )
    return display_zone()


def parse_timestamp(value: str | None, *, tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime.

    Naive values are read as wall-clock time in ``tz`` (the display zone by
    default). Returns ``None`` for blank or malformed input.
    """
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz or display_zone())
    return parsed


def format_date(date_string: str | None, time_only: bool = False, *, tz: tzinfo | None = None) -> str:
    """Render a timestamp as ``Jan 5, 2025`` or, with ``time_only``, ``3:05 PM``."""
    zone = tz or display_zone()
    parsed = parse_timestamp(date_string, tz=zone)
    if parsed is None:
        return INVALID_DATE
    local = parsed.astimezone(zone)
    if time_only:
        hour = local.hour % 12 or 12
        meridiem = "AM" if local.hour < 12 else "PM"
        return f"{hour}:{local.minute:02d} {meridiem}"
    return f"{local:%b} {local.day}, {local.year}"


def normalize_iso(value: str | None, *, tz: tzinfo | None = None) -> str:
    """Return the canonical UTC form ``2025-01-05T15:05:00.000Z``.

    Raises ``ValueError`` when the value is not a timestamp.
    """
    parsed = parse_timestamp(value, tz=tz)
    if parsed is None:
        raise ValueError(f"Invalid timestamp: {value!r}")
    moment = parsed.astimezone(UTC)
    millis = moment.microsecond // 1000
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{millis:03d}Z"


def to_local_input(value: str | None, *, tz: tzinfo | None = None) -> str:
    """Convert a stored timestamp into the editor's ``YYYY-MM-DDTHH:MM`` value."""
    zone = tz or display_zone()
    parsed = parse_timestamp(value, tz=zone)
    if parsed is None:
        return ""
    return parsed.astimezone(zone).strftime(LOCAL_INPUT_FORMAT)


def from_local_input(value: str, *, tz: tzinfo | None = None) -> str:
    """Convert an editor ``YYYY-MM-DDTHH:MM`` value back to canonical ISO."""
    return normalize_iso(value, tz=tz)
