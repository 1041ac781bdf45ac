"""
Questions Portal Backend — Test Configuration (conftest.py)
============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Unit tests (no database):
    ├── mock_db_session: AsyncMock session that records add/flush/delete
    └── make_question / make_encounter / make_vote: in-memory stand-ins
        for loaded ORM objects

    Integration tests (in-memory SQLite through aiosqlite):
    ├── db_engine: fresh schema per test from Base.metadata
    ├── session_factory: async_sessionmaker bound to db_engine
    └── api_client: HTTPX AsyncClient against the app, with get_db_session
        overridden to use db_engine
"""

import os
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any app import: settings and the engine are module singletons
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LEGACY_OWNERSHIP_CHECK"] = "false"

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.models  # noqa: E402,F401
from app.database import Base, enable_sqlite_foreign_keys, get_db_session  # noqa: E402
from app.models.question import QuestionType  # noqa: E402
from app.models.user import User  # noqa: E402
from app.models.vote import VoteType  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

def _apply_defaults(obj) -> None:
    """Mimics what a flush does to a new ORM object: ids and timestamps."""
    now = datetime.now(timezone.utc)
    if getattr(obj, "id", None) is None:
        obj.id = uuid.uuid4()
    for attr in ("created_at", "updated_at"):
        if hasattr(type(obj), attr) and getattr(obj, attr, None) is None:
            setattr(obj, attr, now)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    session.added collects objects passed to add(); flush() assigns ids and
    timestamps to them like a real flush would.

    Usage:
        mock_db_session.get.return_value = question
        await question_service.update_question(mock_db_session, user_id, question.id, data)
    """
    session = AsyncMock()
    session.added = []

    def _add(obj):
        session.added.append(obj)

    async def _flush():
        for obj in session.added:
            _apply_defaults(obj)

    session.add = MagicMock(side_effect=_add)
    session.flush = AsyncMock(side_effect=_flush)
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def make_encounter():
    """Factory for encounter-like objects."""
    def _make(
        company="Google",
        location="Singapore",
        role="Software Engineer",
        seen_at=datetime(2022, 6, 1, tzinfo=timezone.utc),
    ):
        return SimpleNamespace(
            company=company, location=location, role=role, seen_at=seen_at
        )
    return _make


@pytest.fixture
def make_vote():
    """Factory for vote-like objects."""
    def _make(vote=VoteType.UPVOTE, user_id=None):
        return SimpleNamespace(
            id=uuid.uuid4(), vote=vote, user_id=user_id or uuid.uuid4()
        )
    return _make


@pytest.fixture
def make_question(make_encounter):
    """
    Factory for loaded-question-like objects (encounters, votes, user set).

    The default question has one encounter at Google/Singapore, no votes
    and an author named "Ada".
    """
    def _make(
        encounters=None,
        votes=None,
        user_name="Ada",
        question_type=QuestionType.CODING,
        user_id=None,
    ):
        now = datetime.now(timezone.utc)
        return SimpleNamespace(
            id=uuid.uuid4(),
            content="Reverse a linked list",
            question_type=question_type,
            user_id=user_id or uuid.uuid4(),
            created_at=now,
            updated_at=now,
            encounters=[make_encounter()] if encounters is None else encounters,
            votes=votes or [],
            user=SimpleNamespace(name=user_name) if user_name is not None else None,
        )
    return _make


# ══════════════════════════════════════════════════════════════════════════
# Integration Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with the full schema, shared by one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
def user_id():
    return uuid.uuid4()


async def _seed_user(session_factory, user_id, name):
    async with session_factory() as session:
        session.add(User(id=user_id, name=name))
        await session.commit()


@pytest_asyncio.fixture
async def auth_headers(session_factory, user_id):
    """
    Identity header as set by the upstream session provider.

    The users row is seeded because foreign keys are enforced.
    """
    await _seed_user(session_factory, user_id, "Ada")
    return {"X-User-ID": str(user_id)}


@pytest_asyncio.fixture
async def other_headers(session_factory):
    """A second registered caller who owns nothing."""
    other_id = uuid.uuid4()
    await _seed_user(session_factory, other_id, "Grace")
    return {"X-User-ID": str(other_id)}


@pytest_asyncio.fixture
async def api_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    get_db_session is overridden to use the test engine with the same
    commit-on-success / rollback-on-error semantics. App exceptions are
    not re-raised into the test so 500 responses can be asserted.
    """
    from app.main import app

    async def _session_override():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _session_override
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
