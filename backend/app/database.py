"""
Chirper Backend: Database Session Management
============================================

What:  Async SQLAlchemy engine construction, session factory, and FastAPI dependency.
How:   `create_app` builds one engine and one session factory from Settings and
       stores them on `app.state`. Each request receives its own session through
       `get_db_session`, which commits on success and rolls back on error.
       Repositories receive that session as a constructor argument.
Who:   Used by the app factory, the dependency providers and the tests.
When:  Engine is built once per application instance; sessions are created per request.

Transaction Scope:
    One session == one transaction per request. A find-then-act sequence
    inside a single handler (update, delete) therefore runs atomically
    with respect to the commit.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings
from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share one metadata object,
    which Alembic reads for autogenerate and `create_tables` uses for quickstarts.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def build_engine(config: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    Pool sizing only applies to server databases; SQLite engines get the
    dialect's default pool (single file, no network connections to manage).
    """
    options = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": config.log_level == "DEBUG",
    }
    if not config.is_sqlite:
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(config.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create the AsyncSession factory bound to `engine`.

    expire_on_commit=False: response schemas are built from ORM objects after
    the handler returns, when the session has already committed.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Takes the session factory the app factory placed on `app.state`
        2. Yields a new session to the dependency chain (repositories, services)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers;
           SQLAlchemy errors are wrapped in DatabaseError
        5. Always: closes the session (returns connection to pool)
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            # Repositories absorb their own statement errors, so anything
            # reaching here failed at commit time
            await session.rollback()
            logger.error("Transaction failed: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__}) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all tables registered on `Base.metadata` that do not exist yet.

    Used when `DB_CREATE_TABLES` is set and by the test suite; production
    databases are migrated with Alembic instead.
    """
    # Register the models with Base.metadata before create_all runs
    from app.models import account, message  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Gracefully closes all connections in the pool on shutdown."""
    await engine.dispose()
