from __future__ import annotations
import os

# Tests never talk to the Postgres service; must be set before app.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db import Base, get_session
from helpers import Factory


@pytest_asyncio.fixture
async def session_maker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, expire_on_commit=False)

    async def _get_session():
        async with maker() as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    yield maker
    app.dependency_overrides.pop(get_session, None)
    await engine.dispose()


@pytest_asyncio.fixture
async def factory(session_maker) -> Factory:
    return Factory(session_maker)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture
async def file_session_maker(tmp_path):
    """A file database, so each session gets its own connection and commits can interleave."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()
