"""Shared test fixtures."""

from collections.abc import AsyncGenerator, AsyncIterator, Iterator
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.blu_common.clock import FixedClock
from src.blu_common.database import get_db_session
from src.main import app


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Business clock pinned to 2026-02-05 12:00 in Sao Paulo."""
    return FixedClock(datetime(2026, 2, 5, 15, 0, tzinfo=UTC))


@pytest.fixture
def no_database() -> Iterator[AsyncMock]:
    """Replace the request-scoped session with an AsyncMock."""
    session = AsyncMock()

    async def _session() -> AsyncGenerator[AsyncMock, None]:
        yield session

    app.dependency_overrides[get_db_session] = _session
    yield session
    app.dependency_overrides.pop(get_db_session, None)
