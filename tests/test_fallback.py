"""Tests for placeholder event generation."""
from datetime import datetime, timedelta

from events_api.fallback import generate_fallback_events, should_use_fallback
from events_api.models import Event

FALLBACK_NAMES = ["Zip Jam Festival", "Art & Wine Walk", "Tech Meetup"]


def test_generates_three_events_in_fixed_order():
    now = datetime(2025, 9, 1, 12, 0, 0)

    events = generate_fallback_events("99999", now=now)

    assert [e.name for e in events] == FALLBACK_NAMES
    assert [e.location for e in events] == ["Main Street Park", "Historic District", "Innovation Hub"]
    assert [e.date_time for e in events] == [
        now + timedelta(days=3),
        now + timedelta(days=7),
        now + timedelta(days=10),
    ]
    assert all(e.zip_code == "99999" for e in events)


def test_defaults_to_current_time():
    before = datetime.now()
    events = generate_fallback_events("84098")
    after = datetime.now()

    for event, days in zip(events, (3, 7, 10)):
        assert before + timedelta(days=days) <= event.date_time <= after + timedelta(days=days)
        assert event.date_time > after


def test_each_call_draws_fresh_ids():
    first = generate_fallback_events("84098")
    second = generate_fallback_events("84098")

    ids = [e.id for e in first + second]
    assert len(set(ids)) == 6


def test_should_use_fallback_on_empty_or_error():
    event = Event(name="A", location="B", zip_code="84098", date_time="2025-09-20T10:00:00")

    assert should_use_fallback([]) is True
    assert should_use_fallback([], RuntimeError("boom")) is True
    assert should_use_fallback([event], RuntimeError("boom")) is True
    assert should_use_fallback([event]) is False
