"""Development helpers for populating the remote event store with fake events."""

from __future__ import annotations

import random
from datetime import datetime, timedelta

from faker import Faker

from .schemas import SENTINEL_ID, Event, Invitee
from .services import EventService
from .utils import normalize_iso, utcnow

_event_types = [
    "Mixer",
    "Hangout",
    "Workshop",
    "Field Trip",
    "Meet & Greet",
    "Dinner",
    "Discussion",
    "Offsite",
]


def seed_fake_events(
    service: EventService,
    *,
    event_count: int = 10,
    max_invitees_per_event: int = 3,
    fake: Faker | None = None,
) -> dict[str, int]:
    """Create synthetic events through the event service.

    Returns counts of created and rejected events plus the invitees sent.
    """
    if event_count < 0:
        raise ValueError("event_count must be >= 0")
    if max_invitees_per_event < 0:
        raise ValueError("max_invitees_per_event must be >= 0")

    fake = fake or Faker()
    stats = {"events": 0, "rejected": 0, "invitees": 0}
    for _ in range(event_count):
        event = build_fake_event(fake, max_invitees=max_invitees_per_event)
        response = service.create_update_event(event)
        if response.success:
            stats["events"] += 1
            stats["invitees"] += len(event.invites)
        else:
            stats["rejected"] += 1
    if stats["events"]:
        service.invalidate_events()
    return stats


def build_fake_event(fake: Faker, *, max_invitees: int) -> Event:
    start_time = _random_start_time()
    end_time = start_time + timedelta(hours=random.randint(1, 6))
    return Event(
        id=SENTINEL_ID,
        name=f"{fake.city()} {random.choice(_event_types)}",
        start_time=normalize_iso(start_time.isoformat() + "+00:00"),
        end_time=normalize_iso(end_time.isoformat() + "+00:00"),
        venue=fake.address().replace("\n", ", "),
        invites=_fake_invitees(fake, max_invitees),
    )


def _random_start_time() -> datetime:
    now = utcnow().replace(second=0, microsecond=0)
    day_offset = random.randint(-7, 30)
    minute_offset = random.randint(0, 23 * 4) * 15
    return now + timedelta(days=day_offset, minutes=minute_offset)


def _fake_invitees(fake: Faker, max_invitees: int) -> list[Invitee]:
    if max_invitees <= 0:
        return []
    invitees: list[Invitee] = []
    seen: set[str] = set()
    for _ in range(random.randint(0, max_invitees)):
        email = fake.unique.email()
        if email.lower() in seen:
            continue
        seen.add(email.lower())
        invitees.append(Invitee(name=fake.name(), email=email))
    return invitees
