"""Shared fixtures for the events API tests."""
import os
from typing import Any, Dict, Tuple
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from events_api.dynamodb import EventStore  # noqa: E402
from events_api.main import app, get_event_store  # noqa: E402


class FakeEventsTable:
    """In-memory stand-in for the DynamoDB Events table keyed by (zipCode, id)."""

    def __init__(self):
        self.items: Dict[Tuple[str, str], Dict[str, Any]] = {}

    async def put_item(self, Item):
        self.items[(Item["zipCode"], Item["id"])] = dict(Item)
        return {}

    async def query(self, KeyConditionExpression, **kwargs):
        zip_code = KeyConditionExpression.get_expression()["values"][1]
        items = [dict(item) for (zip_key, _), item in self.items.items() if zip_key == zip_code]
        return {"Items": items, "Count": len(items)}

    async def get_item(self, Key):
        item = self.items.get((Key["zipCode"], Key["id"]))
        return {"Item": dict(item)} if item is not None else {}

    async def delete_item(self, Key):
        self.items.pop((Key["zipCode"], Key["id"]), None)
        return {}


@pytest.fixture
def mock_table():
    """DynamoDB Table handle with every call mocked; queries return no items by default."""
    table = AsyncMock()
    table.query.return_value = {"Items": []}
    table.get_item.return_value = {}
    return table


@pytest.fixture
def fake_table():
    return FakeEventsTable()


@pytest.fixture
def sample_item():
    return {
        "id": "abc123",
        "name": "Mock Event",
        "location": "Mock Location",
        "zipCode": "84098",
        "date": "2025-09-20T10:00:00",
    }


@pytest.fixture
def api_client():
    """Return a factory building an HTTP client for the app around a given store."""

    def make_client(store: EventStore) -> AsyncClient:
        app.dependency_overrides[get_event_store] = lambda: store
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield make_client
    app.dependency_overrides.clear()
