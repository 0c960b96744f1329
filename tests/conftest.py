"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests. Every test function gets
its own SQLite database file created from SQLModel.metadata.
"""

import os
from collections.abc import AsyncGenerator

# Settings are read when admschool.main is imported, so the signing key must
# be in the environment before that import happens
os.environ.setdefault("JWT_SECRET_KEY", "env-secret-key-for-tests-0123456789abcdef")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel  # noqa: E402

import admschool.models  # noqa: E402, F401  # registers all tables
from admschool.config import Settings  # noqa: E402
from admschool.core.database import get_db  # noqa: E402
from admschool.main import create_app  # noqa: E402
from admschool.models.user import Users  # noqa: E402
from admschool.services.tokens import TokenService  # noqa: E402
from admschool.services.users import create_user  # noqa: E402

TEST_SECRET_KEY = "test-secret-key-with-at-least-32-characters"
TEST_PASSWORD = "Secret@123"


@pytest.fixture
def settings() -> Settings:
    """Explicit settings for tests (independent of the process environment)."""
    return Settings(
        JWT_SECRET_KEY=TEST_SECRET_KEY,
        JWT_ISSUER="admschool-test",
        JWT_AUDIENCE="admschool-test-clients",
        DATABASE_URL="sqlite+aiosqlite://",
    )


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a file-backed SQLite engine with all tables for one test.

    A file (not :memory:) lets several sessions see the same data, which the
    concurrent refresh tests rely on.
    """
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        connect_args={"timeout": 30},
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for each test."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def token_service(db_session: AsyncSession, settings: Settings) -> TokenService:
    return TokenService(db_session, settings)


@pytest.fixture
def app(db_session: AsyncSession, settings: Settings) -> FastAPI:
    """
    FastAPI app built with the test settings, sharing the test database session.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    test_app = create_app(settings)
    test_app.dependency_overrides[get_db] = override_get_db
    return test_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.post("/api/v1/auth/login", json={...})
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
async def active_user(db_session: AsyncSession) -> Users:
    """
    Active user a@test.com / Secret@123 with roles Admin and User.
    """
    user = await create_user(
        db_session,
        name="Ana Admin",
        email="a@test.com",
        password=TEST_PASSWORD,
        roles=["Admin", "User"],
    )
    await db_session.commit()
    return user


@pytest.fixture
async def inactive_user(db_session: AsyncSession) -> Users:
    """Inactive user i@test.com / Secret@123."""
    user = await create_user(
        db_session,
        name="Ivo Inactive",
        email="i@test.com",
        password=TEST_PASSWORD,
        roles=["User"],
        is_active=False,
    )
    await db_session.commit()
    return user
