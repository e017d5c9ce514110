"""
Global test fixtures and configuration.

This module provides base fixtures for all tests:
- In-memory SQLite database, created from scratch for each test
- Database session and EntityRepository bound to it
- HTTP client with dependency overrides
- Signed-in console session (auth_headers)
"""

import os
import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from comprebem.core.security import get_password_hash

ADMIN_PASSWORD = "test-password"

# Set test environment variables BEFORE importing app
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite:///:memory:"
os.environ["CONSOLE_ADMIN_EMAIL"] = "admin@comprebem.com.br"
os.environ["CONSOLE_ADMIN_PASSWORD_HASH"] = get_password_hash(ADMIN_PASSWORD)
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ORDER_WRITES_ATOMIC"] = "true"

from comprebem.main import app
from comprebem.api.deps import get_db
from comprebem.db.database import Base
from comprebem.db.models import client_model, order_model, product_model  # noqa: F401
from comprebem.services.repository import EntityRepository

TEST_DATABASE_URL = os.environ["DATABASE_URL_OVERRIDE"]
ADMIN_EMAIL = os.environ["CONSOLE_ADMIN_EMAIL"]


# ==================== Database ====================

@pytest.fixture(scope="function")
async def test_engine():
    """
    Create a fresh in-memory database for each test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,  # Set to True for SQL debugging
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    """Session factory with the same options as the application's."""
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    session = session_factory()
    yield session
    await session.close()


@pytest.fixture(scope="function")
def repository(db_session: AsyncSession) -> EntityRepository:
    return EntityRepository(db_session)


# ==================== FastAPI Client ====================

@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create HTTP client for testing FastAPI endpoints.

    Overrides get_db so the endpoints use the test database session.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(client: AsyncClient):
    """Sign in as the console administrator and return the bearer header."""
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}
