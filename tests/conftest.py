"""
Pytest configuration and fixtures for tests.
Provides reusable test fixtures for database, users, signaling and clients.
"""
import os

# Settings are read at import time, configure before importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SIGNALING_API_URL"] = ""
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-characters")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, List, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from callhub.core.database import get_db
from callhub.core.exceptions import SignalingProviderError
from callhub.core.locks import KeyedLock
from callhub.core.security import create_user_access_token, hash_password
from callhub.core.signaling import SignalingProvider
from callhub.dependencies import get_signaling_provider
from callhub.main import app
from callhub.models.base import Base
from callhub.models.call import CallType
from callhub.models.user import User, UserRole
from callhub.services.call_service import CallService


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "password123"


class FakeSignalingProvider(SignalingProvider):
    """Records provider calls instead of reaching a real service."""

    def __init__(self):
        self.created: List[str] = []
        self.ended: List[str] = []
        self.created_types: List[CallType] = []
        self.fail_create = False
        self.fail_end = False

    async def create_call(
        self, call_id: str, created_by: str, call_type: CallType = CallType.DEFAULT
    ) -> Optional[str]:
        if self.fail_create:
            raise SignalingProviderError("provider refused call creation")
        self.created.append(call_id)
        self.created_types.append(call_type)
        return f"ext-{call_id}"

    async def end_call(self, handle: str) -> None:
        if self.fail_end:
            raise SignalingProviderError("provider refused call teardown")
        self.ended.append(handle)

    def create_user_token(self, user_id: str) -> Optional[str]:
        return f"join-{user_id}"


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: Optional[datetime] = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2025, 12, 16, 11, 30, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def signaling() -> FakeSignalingProvider:
    """Fake signaling provider shared by services and routes in a test."""
    return FakeSignalingProvider()


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock for lifecycle timestamps."""
    return FakeClock()


@pytest.fixture
def call_service(db_session, signaling, clock) -> CallService:
    """Call service wired to the test session, fake provider and clock."""
    return CallService(db_session, signaling, clock=clock, locks=KeyedLock())


async def _create_user(db_session: AsyncSession, email: str, name: str, role: UserRole) -> User:
    user = User(
        email=email,
        name=name,
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    return await _create_user(db_session, "alice@example.com", "Alice", UserRole.USER)


@pytest.fixture
async def test_user_2(db_session: AsyncSession) -> User:
    """Create a second test user."""
    return await _create_user(db_session, "bob@example.com", "Bob", UserRole.USER)


@pytest.fixture
async def test_user_3(db_session: AsyncSession) -> User:
    """Create a third test user."""
    return await _create_user(db_session, "carol@example.com", "Carol", UserRole.USER)


@pytest.fixture
async def test_admin(db_session: AsyncSession) -> User:
    """Create an admin user."""
    return await _create_user(db_session, "admin@example.com", "Admin", UserRole.ADMIN)


def _headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_access_token(user.id, user.role)}"}


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Authentication headers for test_user."""
    return _headers_for(test_user)


@pytest.fixture
def auth_headers_2(test_user_2) -> dict:
    """Authentication headers for test_user_2."""
    return _headers_for(test_user_2)


@pytest.fixture
def admin_headers(test_admin) -> dict:
    """Authentication headers for test_admin."""
    return _headers_for(test_admin)


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession, signaling) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with dependency overrides."""

    async def override_get_db():
        yield db_session

    # Override dependencies
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_signaling_provider] = lambda: signaling

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # Clear overrides after test
    app.dependency_overrides.clear()
