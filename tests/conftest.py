"""
Shared test fixtures for collabhive.

Uses an in-memory SQLite database (aiosqlite) with per-test table
create/drop, an in-memory fake of the Valkey cache, and JWTs minted with
the same secret the API verifies against.
"""

import fnmatch
import os
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-tests")

from collabhive.db.base import Base  # noqa: E402
from collabhive.main import app  # noqa: E402
import collabhive.models  # noqa: E402,F401

TEST_DB_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Single shared in-memory connection so every session sees one database."""
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    """Fresh tables per test: create → yield session → drop."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with factory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def failing_execute(db_session, monkeypatch):
    """Factory: make the n-th later ``db_session.execute`` call raise."""
    original = db_session.execute

    def _arm(call_number: int):
        calls = 0

        async def execute(*args, **kwargs):
            nonlocal calls
            calls += 1
            if calls == call_number:
                raise RuntimeError("connection reset")
            return await original(*args, **kwargs)

        monkeypatch.setattr(db_session, "execute", execute)

    return _arm


# ---------------------------------------------------------------------------
# Valkey fake (no live Valkey needed)
# ---------------------------------------------------------------------------


class FakeCache:
    """
    In-memory stand-in for ``ValkeyCache``.

    ``scan`` pages through keys like the real SCAN command: a numeric cursor
    that returns to "0" once every key has been visited. Setting ``fail``
    makes every call raise, to exercise cache degradation paths.
    """

    def __init__(self, page_size: int = 2):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.page_size = page_size
        self.fail = False
        self.scan_calls = 0

    def _check(self):
        if self.fail:
            raise ConnectionError("valkey unavailable")

    async def get(self, key: str) -> str | None:
        self._check()
        return self.store.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def scan(self, cursor: str, match: str, count: int = 100):
        self._check()
        self.scan_calls += 1
        keys = sorted(self.store)
        start = int(cursor)
        page = keys[start : start + self.page_size]
        next_index = start + self.page_size
        next_cursor = "0" if next_index >= len(keys) else str(next_index)
        return next_cursor, [key for key in page if fnmatch.fnmatchcase(key, match)]

    async def delete(self, keys) -> int:
        self._check()
        deleted = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                deleted += 1
        return deleted


@pytest_asyncio.fixture()
async def fake_cache():
    return FakeCache()


# ---------------------------------------------------------------------------
# Test client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def test_client(db_session, fake_cache):
    from collabhive.db.session import get_db
    from collabhive.db.valkey import get_cache

    async def override_get_db():
        try:
            yield db_session
        finally:
            pass

    async def override_get_cache():
        return fake_cache

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = override_get_cache

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def access_token():
    """Factory: HS256 tokens signed like the external auth provider signs them."""
    from jose import jwt

    from collabhive.config import settings

    def _mint(claims: dict, expires_delta: timedelta = timedelta(minutes=15)) -> str:
        expire = datetime.now(timezone.utc) + expires_delta
        return jwt.encode(
            {**claims, "exp": expire},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )

    return _mint


@pytest.fixture
def auth_headers(access_token):
    """Factory: bearer headers whose ``sub`` claim is the given profile id."""

    def _headers(user_id: str, **claims) -> dict[str, str]:
        token = access_token(
            {"sub": user_id, **claims}, expires_delta=timedelta(minutes=30)
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def profile_factory(db_session):
    from collabhive.models import Profile

    async def _create(
        name: str = "Test User",
        user_id: str | None = None,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> Profile:
        profile = Profile(
            id=user_id or f"user_{uuid4().hex[:8]}",
            name=name,
            email=email or f"user+{uuid4().hex[:6]}@example.com",
            avatar_url=avatar_url,
            bio="",
            active_project_slots=3,
        )
        db_session.add(profile)
        await db_session.commit()
        return profile

    return _create


@pytest_asyncio.fixture(scope="function")
async def project_factory(db_session):
    """Create a project together with its creator relationship row."""
    from collabhive.models import Collaboration, CollaborationRelationship, Project

    async def _create(
        creator,
        name: str = "Test Project",
        is_open: bool = True,
        complexity: str = "beginner",
        roles: list[str] | None = None,
        technologies: list[str] | None = None,
        created_at: datetime | None = None,
    ) -> Project:
        project = Project(
            name=name,
            description=f"{name} description",
            is_open=is_open,
            complexity=complexity,
        )
        if created_at is not None:
            project.created_at = created_at
        project.roles_open = roles or []
        project.technologies = technologies or []
        db_session.add(project)
        await db_session.flush()

        db_session.add(
            Collaboration(
                project_id=project.id,
                profile_id=creator.id,
                relation=CollaborationRelationship.CREATOR,
            )
        )
        await db_session.commit()
        return project

    return _create


@pytest_asyncio.fixture(scope="function")
async def collaboration_factory(db_session):
    from collabhive.models import Collaboration

    async def _create(project, profile, relation, message: str | None = None):
        collaboration = Collaboration(
            project_id=project.id,
            profile_id=profile.id,
            relation=relation,
            request_message=message,
        )
        db_session.add(collaboration)
        await db_session.commit()
        return collaboration

    return _create


@pytest_asyncio.fixture(scope="function")
async def favorite_factory(db_session):
    from collabhive.models import project_favorites

    async def _create(profile, project):
        await db_session.execute(
            project_favorites.insert().values(
                profile_id=profile.id, project_id=project.id
            )
        )
        await db_session.commit()

    return _create