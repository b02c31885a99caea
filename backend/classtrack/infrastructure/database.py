"""Database Session Manager — async connection pool with rollback, health checks, shutdown.

Invariants:
    - Every session rolls back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - Constraint and data errors the payload caused surface as ConstraintViolationError
      (409 unique/not-null, 400 bad value); every other SQLAlchemy failure is StoreError.
      Neither is ever reported as a version conflict
    - ClassTrackError raised inside a session passes through untouched

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Exception tables checked most-specific first, client failures before store
      failures, so adding a driver-specific mapping is one line
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    DataError, IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from classtrack.core.errors import ClassTrackError, ConstraintViolationError, StoreError

logger = logging.getLogger(__name__)

_CLIENT_FAILURES: tuple[tuple[type[SQLAlchemyError], str, int], ...] = (
    (IntegrityError, "Value clashes with another record or leaves a required field empty", 409),
    (DataError, "Value has the wrong type or is out of range for its field", 400),
)

_STORE_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def to_domain_error(exc: SQLAlchemyError) -> ClassTrackError:
    """Translate a SQLAlchemy failure into a client constraint error or a store error."""
    for exc_type, message, http_status in _CLIENT_FAILURES:
        if isinstance(exc, exc_type):
            return ConstraintViolationError(message, http_status)
    for exc_type, message, operation in _STORE_FAILURES:
        if isinstance(exc, exc_type):
            return StoreError(message, operation)
    return StoreError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the async engine and hands out sessions that roll back on failure."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"DB error ({type(e).__name__}): {e}")
            raise to_domain_error(e) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
