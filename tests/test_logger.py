"""Tests for the structured logging helpers."""
import structlog

from shared.logger import bind_request_context, configure_logging


def test_bind_request_context_replaces_previous_request_and_keeps_service():
    configure_logging(service="events_api", environment="test", level="WARNING")

    bind_request_context(request_id="first", path="/events")
    bind_request_context(request_id="second")

    context = structlog.contextvars.get_contextvars()
    assert context == {"request_id": "second", "service": "events_api"}
    structlog.contextvars.clear_contextvars()
