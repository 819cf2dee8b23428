from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from fake_service import FakeNoteService
from notekeep_client.context import ClientContext
from notekeep_client.session.storage import MemoryStorage

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)
EMAIL = "ada@example.com"
PASSWORD = "correct horse"


@pytest.fixture
def service() -> FakeNoteService:
    svc = FakeNoteService()
    svc.add_user(EMAIL, PASSWORD, username="ada", full_name="Ada Lovelace")
    return svc


@pytest.fixture
def http_client(service: FakeNoteService) -> TestClient:
    return TestClient(service.app)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def make_context(storage: MemoryStorage, http_client: TestClient):
    """Opens a new context over the shared storage and cookie jar, like a new browser tab."""

    def _make() -> ClientContext:
        return ClientContext.over_http(storage=storage.connect(), http_client=http_client, clock=lambda: NOW)

    return _make


@pytest.fixture
def signed_in(make_context) -> ClientContext:
    ctx = make_context()
    ctx.session.login(EMAIL, PASSWORD)
    return ctx
