"""Shared test fixtures for the dice bot test suite.

db_engine
    Fresh in-memory SQLite database per test. StaticPool keeps every logical
    connection on the same database.

db
    An AsyncSession on db_engine, for tests that call session helpers or the
    dispatcher directly.

guild_api
    A recording fake of the platform client. Replies land in ``sent``.

client
    An AsyncClient wired to the FastAPI app with get_db and get_guild_api
    overridden to use the fixtures above.

For tests with no DB at all (dice engine), no fixture is needed.
"""

from __future__ import annotations

import unittest.mock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dicebot.config import settings
from dicebot.database import Base, get_db
from dicebot.guild_api import HttpGuildApi, get_guild_api
from dicebot.main import app
from dicebot.schemas import MessageToCreate


class RecordingGuildApi:
    """Collects replies as (kind, target_id, reply) tuples."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, MessageToCreate]] = []

    async def post_message(self, channel_id: str, reply: MessageToCreate) -> None:
        self.sent.append(("channel", channel_id, reply))

    async def post_direct_message(self, guild_id: str, reply: MessageToCreate) -> None:
        self.sent.append(("direct", guild_id, reply))


@pytest.fixture(autouse=True, scope="session")
def block_real_guild_api():
    """Fail fast if any test reaches the real platform OpenAPI.

    Tests that exercise HttpGuildApi itself pass a mock transport and patch
    this back out explicitly.
    """

    async def _blocked(*args, **kwargs):
        raise RuntimeError(
            "Real guild API call attempted in tests; "
            "use the guild_api fixture or a mock transport"
        )

    with unittest.mock.patch.object(HttpGuildApi, "_post", new=_blocked):
        yield


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    """Point the message log at a per-test temporary directory."""
    path = tmp_path / "logs"
    monkeypatch.setattr(settings, "log_dir", str(path))
    return path


@pytest.fixture(autouse=True)
def unsigned_callbacks(monkeypatch):
    """Run without a callback secret unless a test configures one."""
    monkeypatch.setattr(settings, "qq_bot_secret", "")
    monkeypatch.setattr(settings, "environment", "local")


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def guild_api() -> RecordingGuildApi:
    return RecordingGuildApi()


@pytest.fixture
async def client(session_factory, guild_api):
    """AsyncClient wired to the app with test DB and recording guild API."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_guild_api] = lambda: guild_api

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_guild_api, None)
