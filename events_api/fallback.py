"""Placeholder events served when a zip code has no stored events."""
from datetime import datetime, timedelta
from typing import List, Optional

from events_api.models import Event

# (name, location, days from now)
FALLBACK_TEMPLATES = (
    ("Zip Jam Festival", "Main Street Park", 3),
    ("Art & Wine Walk", "Historic District", 7),
    ("Tech Meetup", "Innovation Hub", 10),
)


def should_use_fallback(events: List[Event], error: Optional[Exception] = None) -> bool:
    """
    Decide whether a zip code lookup is answered with placeholder events.

    A failed store query and an empty partition are treated the same way.
    """
    return error is not None or not events


def generate_fallback_events(zip_code: str, now: Optional[datetime] = None) -> List[Event]:
    """
    Generate the placeholder events for a zip code.

    Every call draws fresh ids; nothing is stored or cached.

    Args:
        zip_code: Zip code the events are generated for
        now: Reference time (defaults to the current local time)

    Returns:
        Three events in fixed order, 3, 7 and 10 days after now
    """
    if now is None:
        now = datetime.now()

    return [
        Event(
            name=name,
            location=location,
            zip_code=zip_code,
            date_time=now + timedelta(days=days),
        )
        for name, location, days in FALLBACK_TEMPLATES
    ]
