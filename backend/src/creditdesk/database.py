"""Database engine, session factory and unit-of-work helper for the embedded store."""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import structlog
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from creditdesk.config import settings

logger = structlog.get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite ships with foreign key enforcement off; turn it on per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    SQLite connections get foreign key enforcement enabled on connect.

    Args:
        database_url: SQLAlchemy async URL (e.g. sqlite+aiosqlite:///./data.db)
        echo: Log emitted SQL

    Returns:
        AsyncEngine: Configured engine
    """
    engine = create_async_engine(database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Create async engine
engine = build_engine(settings.database_url, echo=settings.sql_echo)

# Create async session factory
AsyncSessionLocal = build_session_factory(engine)

# Declarative base for all models
Base = declarative_base()


async def init_db(target: AsyncEngine | None = None) -> None:
    """
    Create the database file (if needed) and all tables.

    Args:
        target: Engine to initialize (defaults to the application engine)
    """
    # Register every model on Base.metadata
    import creditdesk.models  # noqa: F401

    target = target or engine
    url = make_url(str(target.url))
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("database_initialized", url=url.render_as_string(hide_password=True))


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes as one atomic transaction.

    Commits when the block finishes; on any exception the whole transaction
    is rolled back and the exception re-raised.

    Usage:
        async with unit_of_work(self.db):
            self.db.add(row)
            await ledger.consume(...)

    Args:
        session: Session whose transaction wraps the block

    Yields:
        AsyncSession: The same session
    """
    from creditdesk.metrics import units_of_work_failed_total

    try:
        yield session
        await session.commit()
    except Exception as exc:
        await session.rollback()
        units_of_work_failed_total.labels(error_type=type(exc).__name__).inc()
        logger.warning(
            "unit_of_work_rolled_back",
            error_type=type(exc).__name__,
            error=str(exc),
        )
        raise
