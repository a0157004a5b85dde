"""Root conftest — shared test configuration and async DB fixtures.

Invariants:
    - Environment defaults are set before any relhub module reads settings
    - Every DB test gets a fresh in-memory SQLite database
"""

import os

# Settings are cached on first use; point them at throwaway storage
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)

from relhub.db.base import Base  # noqa: E402
import relhub.models  # noqa: E402,F401


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
