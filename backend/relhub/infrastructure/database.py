"""Database Access — async engine, per-request sessions, and the readiness ping.

Invariants:
    - A session that sees an exception is rolled back before it is closed
    - SQLAlchemy failures surface as DatabaseError (core/errors.py) with the
      operation that failed; other exceptions pass through untouched
    - Pool sizing applies to server databases only; SQLite keeps the driver default

Design Decisions:
    - One module-level manager, created by the FastAPI lifespan via init_db
    - expire_on_commit=False: the state row is read after commit without a refresh
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from relhub.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def _as_database_error(exc: SQLAlchemyError) -> DatabaseError:
    for kind, message, operation in _FAILURES:
        if isinstance(exc, kind):
            return DatabaseError(message, operation)
    return DatabaseError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the async engine and hands out sessions that roll back on failure."""

    def __init__(
        self, database_url: str, pool_size: int = 5, max_overflow: int = 10,
    ):
        options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            options.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            await db.rollback()
            error = _as_database_error(e)
            logger.error(f"{error.message}: {e}", extra={"error_code": error.code})
            raise error from e
        except Exception:
            await db.rollback()
            raise
        finally:
            await db.close()

    async def create_all(self) -> None:
        """Create missing tables. Local SQLite runs skip Alembic."""
        from relhub.db.base import Base
        import relhub.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    """Create the process-wide manager (called from the lifespan)."""
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as db:
        yield db
