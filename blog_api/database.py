"""
Blog API — Database Session Management
========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine (pooled for server databases), provides a
       session dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from blog_api.config import settings
from blog_api.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """
    Engine keyword arguments for the configured database.

    SQLite (used by the test-suite and local runs) does not take the
    queue-pool sizing arguments, so they are only applied to server databases.
    """
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, when the
# response is serialized
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On error: rolls back the transaction and re-raises
        4. On success: commits the transaction; a failed commit is rolled
           back and raised as DatabaseError (→ 500)
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/blogs")
        async def list_blogs(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    # the context manager closes the session on every path
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

        try:
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error("Commit failed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save changes. Please try again.",
                context={"error_type": type(e).__name__},
            )


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections; called from the application lifespan."""
    await engine.dispose()
