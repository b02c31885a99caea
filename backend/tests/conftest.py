"""Root conftest — shared fixtures: SQLite test DB, API client, in-memory repository.

Invariants:
    - Every test gets a fresh in-memory SQLite database with all seven tables
    - get_db dependency overridden to use the test DB
    - db_manager patched so readiness probes hit the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the CAS statement is the same
      UPDATE ... WHERE id AND version RETURNING on both SQLite and PostgreSQL
"""

import os

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient  # noqa: E402

from classtrack.db.base import Base  # noqa: E402
import classtrack.models.registry  # noqa: E402,F401
from classtrack.infrastructure import database as db_module  # noqa: E402
from classtrack.infrastructure.database import DatabaseSessionManager, get_db  # noqa: E402
from classtrack.infrastructure.memory_repository import InMemoryVersionedRepository  # noqa: E402
from classtrack.main import app  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
def fake_db_manager(test_engine, test_session_factory):
    """DatabaseSessionManager wired to the test engine (skips pool arguments)."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(test_session_factory, fake_db_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with fake_db_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = fake_db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def memory_repo():
    return InMemoryVersionedRepository()
