import os
import tempfile
from collections.abc import AsyncGenerator
from pathlib import Path

# Settings are cached on first import, so the test environment must be in place first.
_TEST_DB_PATH = Path(tempfile.gettempdir()) / f"prophyt-test-{os.getpid()}.db"
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_PATH}"
os.environ["PRICE_UPDATER_ENABLED"] = "false"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from prophyt.core.database import AsyncSessionLocal, engine  # noqa: E402
from prophyt.main import app  # noqa: E402
from prophyt.models import Base  # noqa: E402


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fixture for a session on a freshly created schema.

    Every test starts from empty tables. Seed data must be committed so the
    app's own sessions (opened through get_db) can see it.
    """
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Fixture for an async HTTPX test client hooked to the FastAPI app.
    Depends on db_session so the schema exists before any request is handled.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
