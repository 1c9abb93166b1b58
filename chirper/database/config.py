"""
Database configuration and connection management.

This module creates the async engine (connection pool) and session factory.
Nothing here is global: the caller creates the engine at startup, hands
sessions to repositories, and disposes the engine at shutdown.

Example:
    engine = create_engine()
    await create_tables(engine)
    session_factory = create_session_factory(engine)

    async with session_scope(session_factory) as session:
        post = await PostRepository(session).create_post("hello", user_id)

    await dispose_engine(engine)
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from chirper.config.settings import get_database_config

from .base import Base

logger = logging.getLogger(__name__)


def create_engine(
    database_url: Optional[str] = None,
    echo: Optional[bool] = None,
    pool_size: Optional[int] = None,
    max_overflow: Optional[int] = None,
    pool_timeout: Optional[int] = None,
    pool_recycle: Optional[int] = None,
) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    Args:
        database_url: Database URL (uses settings if not provided)
        echo: Enable SQL query logging
        pool_size: Connection pool size
        max_overflow: Maximum pool overflow
        pool_timeout: Pool timeout in seconds
        pool_recycle: Pool recycle time in seconds

    Returns:
        Configured async SQLAlchemy engine
    """
    config = get_database_config()

    if database_url is None:
        database_url = config["database_url"]

    if echo is None:
        echo = config["echo"]

    if pool_size is None:
        pool_size = config["pool_size"]

    if max_overflow is None:
        max_overflow = config["max_overflow"]

    if pool_timeout is None:
        pool_timeout = config["pool_timeout"]

    if pool_recycle is None:
        pool_recycle = config["pool_recycle"]

    if "sqlite" in database_url:
        # One shared connection; an in-memory database lives only as long as it does
        pool_kwargs = {
            "poolclass": StaticPool,
            "connect_args": {
                "check_same_thread": False,
                "timeout": 20,
            },
        }
    else:
        pool_kwargs = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_recycle": pool_recycle,
            "pool_pre_ping": True,
        }

    engine = create_async_engine(
        database_url,
        echo=echo,
        **pool_kwargs
    )

    _add_connection_listeners(engine)

    logger.info(
        f"Created database engine: {database_url.split('@')[-1] if '@' in database_url else database_url}",
        extra={
            "event_type": "database_engine_created",
            "database_type": database_url.split("://")[0],
            "pool_size": pool_size,
            "max_overflow": max_overflow,
        }
    )

    return engine


def _add_connection_listeners(engine: AsyncEngine) -> None:
    """
    Add connection event listeners.

    Args:
        engine: SQLAlchemy async engine
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """SQLite ignores foreign keys (and so ON DELETE CASCADE) unless asked."""
        # The driver's implicit BEGIN breaks SAVEPOINT; transactions are begun below
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory.

    Args:
        engine: SQLAlchemy async engine

    Returns:
        Async session factory
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=True,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all tables that do not exist yet.

    Args:
        engine: SQLAlchemy async engine
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Database tables created successfully",
        extra={"event_type": "database_tables_created"}
    )


async def drop_tables(engine: AsyncEngine) -> None:
    """
    Drop all tables.

    Args:
        engine: SQLAlchemy async engine
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    logger.info(
        "Database tables dropped",
        extra={"event_type": "database_tables_dropped"}
    )


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    Close pooled connections and release the engine.

    Args:
        engine: SQLAlchemy async engine
    """
    await engine.dispose()
    logger.info(
        "Database connections closed",
        extra={"event_type": "database_closed"}
    )


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Run a unit of work: commit on success, roll back on error.

    Yields:
        SQLAlchemy async session

    Example:
        async with session_scope(session_factory) as session:
            await UserRepository(session).create_user("Alice", "alice@example.com", pw_hash)
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_database_health(session_factory: async_sessionmaker[AsyncSession]) -> dict:
    """
    Check database connectivity.

    Returns:
        Health check result dictionary
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        async with session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()

        return {
            "status": "healthy",
            "database": "connected",
            "timestamp": timestamp,
        }

    except Exception as e:
        logger.error(
            f"Database health check failed: {e}",
            extra={"event_type": "database_health_check_failed"},
            exc_info=True
        )
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
            "timestamp": timestamp,
        }


def get_database_info(engine: AsyncEngine) -> dict:
    """
    Describe the engine and its pool.

    Returns:
        Database information dictionary
    """
    pool = engine.pool
    url = str(engine.url)

    return {
        "url": url.split('@')[-1] if '@' in url else url,
        "dialect": engine.dialect.name,
        "driver": engine.dialect.driver,
        "pool": pool.status(),
        "echo": engine.echo,
    }
