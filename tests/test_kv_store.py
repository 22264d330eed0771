"""Tests for the KeyValueRepository and SqlKeyValueStore."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from clicktales.auth import mock_auth
from clicktales.auth.mock_auth import MockAuthService
from clicktales.database.repository import KeyValueRepository
from clicktales.models.kv_entry import Base, KeyValueEntry
from clicktales.storage.kv_store import SqlKeyValueStore

# ── In-memory test database ─────────────────────────────
_test_engine = create_async_engine("sqlite+aiosqlite://", echo=False)
_test_session_factory = async_sessionmaker(_test_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def tables():
    """Create tables in a fresh in-memory DB and drop them afterwards."""
    async with _test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with _test_session_factory() as session:
        session.add(KeyValueEntry(key="theme", value="dark"))
        await session.commit()

    yield

    # Tear down
    async with _test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(tables):
    async with _test_session_factory() as session:
        yield session


# ── Repository ───────────────────────────────────────────

@pytest.mark.asyncio
async def test_get_existing(db_session: AsyncSession):
    repo = KeyValueRepository(db_session)
    assert await repo.get("theme") == "dark"


@pytest.mark.asyncio
async def test_get_missing(db_session: AsyncSession):
    repo = KeyValueRepository(db_session)
    assert await repo.get("nope") is None


@pytest.mark.asyncio
async def test_put_overwrites(db_session: AsyncSession):
    repo = KeyValueRepository(db_session)
    await repo.put("theme", "light")
    await repo.put("lang", "en")
    await db_session.commit()

    assert await repo.get("theme") == "light"
    assert await repo.get("lang") == "en"


@pytest.mark.asyncio
async def test_delete(db_session: AsyncSession):
    repo = KeyValueRepository(db_session)
    await repo.delete("theme")
    await repo.delete("never-existed")
    await db_session.commit()

    assert await repo.get("theme") is None


# ── Store ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_store_round_trip_across_sessions(tables):
    store = SqlKeyValueStore(_test_session_factory)

    await store.set("mockAuthUser", '{"id": "u1"}')
    assert await SqlKeyValueStore(_test_session_factory).get("mockAuthUser") == '{"id": "u1"}'

    await store.delete("mockAuthUser")
    assert await store.get("mockAuthUser") is None


@pytest.mark.asyncio
async def test_mock_auth_session_persists_in_database(tables, monkeypatch):
    monkeypatch.setattr(mock_auth, "SIGN_IN_DELAY_SECONDS", 0)
    store = SqlKeyValueStore(_test_session_factory)

    auth = MockAuthService(store)
    await auth.sign_in_with_password("demo@clicktales.com", "demo123")

    restarted = MockAuthService(SqlKeyValueStore(_test_session_factory))
    await restarted.init()
    session = (await restarted.get_session()).session
    assert session is not None
    assert session.user.email == "demo@clicktales.com"
