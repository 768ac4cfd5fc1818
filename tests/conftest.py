import os
import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.append(str(Path(__file__).parents[1] / "src"))

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Must be set before the app (and its engine) is imported.
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

from spendtrack.db.session import get_db
from spendtrack.main import app


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection, otherwise every connection gets its own empty :memory: DB.
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


@pytest.fixture
async def test_engine():
    """Create tables for tests that need the database, and drop them after.

    Function-scoped so every test gets a clean schema and an engine bound to
    its own event loop. Pure unit tests never request it.
    """
    from spendtrack.models.base import BaseModel

    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs(TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Provide test database session with fresh connection per test."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def test_user(db_session: AsyncSession):
    """Create a test user."""
    from spendtrack.models.user import User
    from spendtrack.repositories.user import UserRepository

    return await UserRepository(db_session).create(
        User(email="testuser@example.com", full_name="Test User")
    )


@pytest.fixture
async def other_user(db_session: AsyncSession):
    """Create a second user for ownership checks."""
    from spendtrack.models.user import User
    from spendtrack.repositories.user import UserRepository

    return await UserRepository(db_session).create(
        User(email="other@example.com", full_name="Other User")
    )


@pytest.fixture
async def auth_headers(test_user):
    """Provide authentication headers with valid JWT token."""
    from spendtrack.core.security import create_access_token

    token = create_access_token(user_id=test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(db_session: AsyncSession):
    """Provide test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
