"""
Database connection and session management
Uses SQLAlchemy async engine (PostgreSQL via asyncpg in production)
Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)


# Base class for all database models
# Reference: https://docs.sqlalchemy.org/en/20/orm/declarative_styles.html
class Base(DeclarativeBase):
    """Base class for SQLAlchemy declarative models"""
    pass


class Database:
    """
    Explicitly constructed store client.

    Owns the async engine and the session factory for the lifetime of the
    process. The application creates one instance in its lifespan handler
    (or receives one from the caller) and disposes it on shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        if not url:
            raise ValueError(
                "DATABASE_URL environment variable is not set. "
                "Please set it in your .env file."
            )
        self.url = url
        connect_args: dict = {}
        if url.startswith("postgresql+asyncpg"):
            # asyncpg-specific connection arguments
            # Reference: https://magicstack.github.io/asyncpg/current/api/index.html#connection
            connect_args = {
                "command_timeout": 60,
                "server_settings": {"application_name": "outswap_api"},
            }

        # NullPool: each session gets a fresh connection, nothing is cached in-process
        # Reference: https://docs.sqlalchemy.org/en/20/core/pooling.html#switching-pool-implementations
        self.engine: AsyncEngine = create_async_engine(
            url,
            echo=echo,
            poolclass=NullPool,
            connect_args=connect_args,
        )
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Keep objects accessible after commit
            autoflush=False,
        )

    async def ping(self) -> None:
        """Run a trivial query, raising if the database is unreachable."""
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """Create tables and indexes declared on Base.metadata."""
        # Models must be imported so their tables are registered
        import outswap.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session for one unit of work.

        - Commits on success
        - Rolls back on error
        - Always closes the session
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                try:
                    await session.rollback()
                except Exception as rollback_error:
                    # Connection already gone; re-raise the error that caused the rollback
                    logger.warning(f"Rollback failed: {rollback_error}")
                raise


def get_database(request: Request) -> Database:
    """Return the Database attached to the running application."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialised for this application")
    return database


# Dependency to get database session
# Used in FastAPI route handlers via dependency injection
# Reference: https://fastapi.tiangolo.com/tutorial/dependencies/
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency function that provides a request-scoped database session"""
    database = get_database(request)
    async with database.session() as session:
        yield session
