"""Database Session Manager — async engine, per-request sessions, readiness probe.

Invariants:
    - A session that sees an exception is rolled back before the exception leaves
    - OrderServiceError passes through unchanged (the store already mapped it)
    - Any other SQLAlchemyError leaving a request becomes DatabaseError (503)
    - health_check never raises: it answers the readiness probe with a bool

Design Decisions:
    - Module-level db_manager set by the FastAPI lifespan through init_db
    - expire_on_commit=False: the store converts ORM rows to records after commit
      without triggering lazy loads in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from order_service.core.errors import DatabaseError, OrderServiceError

logger = logging.getLogger(__name__)


def to_database_error(error: SQLAlchemyError) -> DatabaseError:
    """Client-safe DatabaseError; driver details stay in the log only."""
    if isinstance(error, OperationalError):
        return DatabaseError("database unavailable", "connect")
    return DatabaseError("unexpected database failure", "session")


class DatabaseSessionManager:
    """Owns the async engine and hands out request-scoped sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
        )
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            try:
                yield session
            except OrderServiceError:
                await session.rollback()
                raise
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"Session aborted: {e}", extra={"operation": "session"},
                )
                raise to_database_error(e)

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Readiness check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
