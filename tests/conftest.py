"""Test configuration and fixtures."""
import os

# Must be set before the application settings are imported
os.environ.setdefault("AUTH_BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH_SECRET_KEY", "test-access-secret")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mentorhub.main import app
from mentorhub.database import get_db
from mentorhub.models import Base, Mentor, User
from mentorhub.core.auth import auth_service

TEST_PASSWORD = "Testpassword123"


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    """Create a fresh SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(async_engine):
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(session_factory):
    """Session for arranging and inspecting data outside requests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app with the database dependency overridden."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


async def create_user(session: AsyncSession, email: str, password: str = TEST_PASSWORD, **fields) -> User:
    user = User(
        email=email,
        hashed_password=auth_service.hash_password(password) if password else None,
        **fields,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def create_mentor(session: AsyncSession, user: User, **fields) -> Mentor:
    fields.setdefault("title", "Senior Engineer")
    mentor = Mentor(user_id=user.id, **fields)
    session.add(mentor)
    await session.commit()
    await session.refresh(mentor)
    return mentor


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {auth_service.tokens.issue_access(user.id)}"}


@pytest_asyncio.fixture
async def test_user(async_session):
    """Create test user."""
    return await create_user(
        async_session,
        "test@example.com",
        name="Test User",
        first_name="Test",
        last_name="User",
        profession="Engineer",
    )


@pytest_asyncio.fixture
async def other_user(async_session):
    """Create a second user."""
    return await create_user(async_session, "other@example.com", name="Other User")


@pytest_asyncio.fixture
async def auth_headers(test_user):
    """Create authorization headers for test user."""
    return bearer(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user):
    return bearer(other_user)
