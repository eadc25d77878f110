"""
Pytest configuration and fixtures.
"""

from typing import AsyncGenerator
import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.config import Settings
from app.core.database import Base, build_session_factory, get_db
from app.core.security import PasswordHasher
from app.main import create_app
from app.models.user import User


# In-memory SQLite, one database per test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "testpassword123"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="testing",
        DATABASE_URL=TEST_DATABASE_URL,
        SECRET_KEY="test-secret-key-with-enough-length-for-hs256",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = build_session_factory(test_engine)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_app(test_settings: Settings, test_engine: AsyncEngine) -> FastAPI:
    return create_app(test_settings, engine=test_engine)


@pytest.fixture
async def client(test_app: FastAPI, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client sharing the test session, committed per request like get_db."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    test_app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test"
    ) as ac:
        yield ac

    test_app.dependency_overrides.clear()


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    user = User(
        email="test@example.com",
        hashed_password=PasswordHasher().hash(TEST_PASSWORD),
        name="Test User",
        address="1 Main Street",
        phone="+620000000",
        bank_name="Test Bank",
        bank_account_name="Test User",
        bank_account_number="1234567890",
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def auth_client(
    client: AsyncClient,
    test_user: User,
) -> AsyncClient:
    """Create authenticated test client."""
    response = await client.post(
        "/api/v1/auth/sign-in",
        json={
            "email": "test@example.com",
            "password": TEST_PASSWORD,
        },
    )
    tokens = response.json()

    client.headers["Authorization"] = f"Bearer {tokens['access_token']}"

    return client
