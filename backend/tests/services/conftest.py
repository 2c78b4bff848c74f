"""Service test fixtures — async DB, fake mailer and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db overridden to use the test DB; db_manager patched for the readiness probe
    - Token service and mailer are injected through dependency overrides
      (the lifespan never runs under ASGITransport)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service tests
    - RecordingMailer keeps sent emails in memory so tests can read activation links
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from tasklist.api.dependencies import get_mailer, get_token_service
from tasklist.core.domain_types import UserRole
from tasklist.core.passwords import hash_password
from tasklist.db.base import Base
from tasklist.infrastructure.database import get_db, DatabaseSessionManager
from tasklist.models.user import User
from tasklist.services.token_service import TokenService
import tasklist.infrastructure.database as db_module
from tasklist.main import app

from tests.services.recording_mailer import RecordingMailer

TEST_SECRET = "unit-test-secret"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET)


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
async def client(test_engine, test_session_factory, tokens, mailer):
    """FastAPI test client with DB, token service and mailer overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_service] = lambda: tokens
    app.dependency_overrides[get_mailer] = lambda: mailer

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    await mailer.drain()
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _seed_user(
    db: AsyncSession, username: str, role: UserRole = UserRole.USER,
) -> User:
    user = User(
        username=username,
        email=f"{username}@x.com",
        password_hash=hash_password("pw123"),
        is_activated=True,
        role=role.value,
        lists=[],
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def alice(test_db):
    return await _seed_user(test_db, "alice")


@pytest.fixture
async def bob(test_db):
    return await _seed_user(test_db, "bob")


@pytest.fixture
async def admin(test_db):
    return await _seed_user(test_db, "root", role=UserRole.ADMIN)


@pytest.fixture
def auth_header(tokens):
    """Build an Authorization header for a seeded user."""
    def _header(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {tokens.issue_token(user)}"}
    return _header


@pytest.fixture
def expired_token(tokens):
    def _expired(user: User) -> str:
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        return tokens.issue_token(user, now=issued)
    return _expired
