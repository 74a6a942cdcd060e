"""Pytest configuration for all tests."""

from http.cookies import SimpleCookie
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rollcall.core.context import clear_current_context
from rollcall.infrastructure.persistence import models  # noqa: F401
from rollcall.infrastructure.persistence.database import Base


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(autouse=True)
def _reset_request_context():
    """Make sure no request context leaks between tests."""
    clear_current_context()
    yield
    clear_current_context()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from rollcall.infrastructure.api.app import app
    from rollcall.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.state.rate_limit_storage.clear()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
    app.state.rate_limit_storage.clear()


def session_token(response) -> str:
    """Pull the session credential out of a response's Set-Cookie header."""
    cookie = SimpleCookie()
    cookie.load(response.headers["set-cookie"])
    return cookie["token"].value


@pytest.fixture
def signup(client: AsyncClient):
    """Sign up a user and return ``(user body, token)``.

    The client's cookie jar is cleared afterwards so every later request
    presents exactly the credential the test passes.
    """

    async def _signup(email: str) -> tuple[dict, str]:
        response = await client.post("/users", json={"email": email})
        assert response.status_code == 200, response.text
        token = session_token(response)
        client.cookies.clear()
        return response.json(), token

    return _signup
