# legal_estate/db/database.py

"""
Database Configuration

Async SQLAlchemy engine and session factory, owned by an explicitly
constructed ``Database`` handle. One handle is created at application
startup and passed to every service.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from legal_estate.core.logger import logger

Base = declarative_base()


class Database:
    """
    Connection pool plus session factory.

    Usage:
        async with database.session() as session:      # reads
            ...
        async with database.transaction() as session:  # commit / rollback
            ...
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ):
        self.url = url
        if url.startswith("sqlite"):
            # SQLite: no pooling, foreign keys must be switched on per connection
            self.engine = create_async_engine(
                url,
                echo=echo,
                poolclass=NullPool,
                connect_args={"check_same_thread": False},
            )
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_async_engine(
                url,
                echo=echo,
                pool_pre_ping=True,  # Verify connections before using
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,  # Recycle connections after 1 hour
            )

        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Session with an open transaction; commits on success, rolls back on error."""
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except Exception as e:
                logger.warning(f"Transaction rolled back: {e.__class__.__name__}: {str(e)}")
                raise

    # ========================================================================
    # Utility Functions
    # ========================================================================

    async def create_all(self) -> None:
        # Import models so every table is registered on Base.metadata
        from legal_estate.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        from legal_estate.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
