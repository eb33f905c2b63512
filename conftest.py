import os
from contextlib import asynccontextmanager

# Tests run against a local SQLite file unless TEST_DATABASE_URL points elsewhere
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_wedding_rsvp.db"
)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from wedding_rsvp.config.database import engine  # noqa: E402
from wedding_rsvp.main import app  # noqa: E402
from wedding_rsvp.models.registry import metadata  # noqa: E402


@pytest_asyncio.fixture
async def database():
    """Fresh tables for one test."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    # Pooled connections belong to this test's event loop
    await engine.dispose()


@pytest.fixture
def client_factory():
    """Build a test client with FastAPI dependencies replaced."""

    @asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest_asyncio.fixture
async def client(client_factory):
    async with client_factory() as client:
        yield client
