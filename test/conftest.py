"""
Pytest configuration and fixtures.

Store-backed tests run against the SQL document store on an in-memory
aiosqlite database with a deterministic clock.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from contactforms.config import Settings, StoreBackend
from contactforms.contacts.repository import ContactRepository
from contactforms.contacts.service import ContactService
from contactforms.main import create_app
from contactforms.store.factory import get_document_store
from contactforms.store.sql_adapter import SqlDocumentStore

IN_MEMORY_URL = "sqlite+aiosqlite:///:memory:"
CLOCK_START = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TickingClock:
    """Clock returning a strictly increasing timestamp on every call."""

    def __init__(self, start: datetime = CLOCK_START, step: timedelta = timedelta(minutes=1)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now = self.now + self.step
        return value


def make_form(index: int = 0, **overrides: Any) -> dict[str, Any]:
    """Build a valid camelCase contact form payload."""
    data: dict[str, Any] = {
        "fullName": f"Contact {index}",
        "email": f"contact{index}@example.com",
        "objective": "I want to know more about your services",
    }
    data.update(overrides)
    return data


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        app_env="dev",
        debug=True,
        store_backend=StoreBackend.SQL,
        database_url=IN_MEMORY_URL,
        contacts_collection="contactForms",
    )


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest_asyncio.fixture
async def document_store(clock: TickingClock) -> AsyncGenerator[SqlDocumentStore, None]:
    """Initialized SQL document store on a private in-memory database."""
    engine = create_async_engine(IN_MEMORY_URL, poolclass=StaticPool)
    store = SqlDocumentStore(IN_MEMORY_URL, engine=engine, clock=clock)
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def repository(document_store: SqlDocumentStore) -> ContactRepository:
    return ContactRepository(document_store, collection="contactForms")


@pytest.fixture
def service(repository: ContactRepository) -> ContactService:
    return ContactService(repository)


@pytest.fixture
def app(document_store: SqlDocumentStore) -> FastAPI:
    """Application wired to the test document store."""
    application = create_app()
    application.dependency_overrides[get_document_store] = lambda: document_store
    return application


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
