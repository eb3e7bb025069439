"""
PetSitter Connect Backend — Database Engine & Session Management
================================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       transaction scope every store operation runs in.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine from settings; `session_scope()` opens a
       session, commits on success, rolls back on error and always closes.
Who:   Used by PetSitterStore, the health check, seeding and Alembic.
When:  Engine is created at module import; sessions per store operation.

Transaction Model:
    Each store call gets its own short transaction. The accept-cascade issues
    N independent sibling updates concurrently, which a single shared
    AsyncSession cannot do (sessions are not safe for concurrent use), so the
    unit of work is one operation, not one request.

SQLite Notes:
    SQLite ignores foreign keys unless `PRAGMA foreign_keys=ON` is issued per
    connection; the connect hook below enables it so deleting a listing
    cascades to its applications just like on PostgreSQL.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from petsitter.config import settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    What:    Engine factory shared by the app (module-level engine) and tests
             (a throwaway SQLite file per test).
    How:     pool_pre_ping/pool_recycle for server databases; the foreign key
             pragma hook for SQLite.
    """
    url = make_url(database_url)
    kwargs = {"echo": echo}
    if url.get_backend_name() != "sqlite":
        kwargs["pool_pre_ping"] = settings.db_pool_pre_ping
        kwargs["pool_recycle"] = 3600

    new_engine = create_async_engine(database_url, **kwargs)

    if url.get_backend_name() == "sqlite":
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return new_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: returned ORM objects stay readable after the
    # session closes (the store hands them to services and routes).
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# ── Engine & Session Factory ──────────────────────────────────────────────
engine = build_engine(settings.database_url, echo=settings.db_echo)
async_session_factory = build_session_factory(engine)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with a shared metadata object, used by
    `init_models()` and by Alembic autogenerate.
    """
    pass


# ── Transaction Scope ─────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a session wrapped in a single transaction.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the caller (the caller performs queries)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns connection to pool)

    Example:
        async with session_scope(factory) as session:
            session.add(listing)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def init_models(bind: AsyncEngine = engine) -> None:
    """
    Create all tables that do not exist yet.

    When:  Startup in development/test (settings.db_create_tables) and in
           test fixtures. Deployments run `alembic upgrade head` instead.
    """
    # Import models so they register with Base.metadata
    from petsitter.models import Application, Listing  # noqa: F401

    url = bind.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured (%s)", url.render_as_string(hide_password=True))


async def dispose_engine() -> None:
    """Gracefully closes all pooled connections (application shutdown)."""
    await engine.dispose()
