"""Database configuration and session management."""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def get_async_database_url(url: str) -> str:
    """Convert a standard database URL to an async-compatible URL.

    PostgreSQL URLs in the format postgresql://... need asyncpg
    (postgresql+asyncpg://...), SQLite URLs need aiosqlite.
    """
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


class Database:
    """Handle to the product store.

    Owns the async engine and session factory. The handle is created
    explicitly and opened/closed with the process (see the FastAPI lifespan
    in src.main), then handed to whatever needs sessions.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        """Initialize the handle without connecting.

        Args:
            url: Database URL. Sync driver URLs are converted to async ones.
            echo: Whether to log SQL statements.
            **engine_kwargs: Extra keyword arguments for create_async_engine.
        """
        self.url = get_async_database_url(url)
        self.echo = echo
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_connected(self) -> bool:
        """Whether connect() has been called and close() has not."""
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        """Get the engine, raising if the handle is not open."""
        if self._engine is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._engine

    def connect(self) -> None:
        """Create the engine and session factory."""
        if self._engine is not None:
            return
        kwargs: dict[str, Any] = {"echo": self.echo, **self._engine_kwargs}
        if not self.url.startswith("sqlite"):
            kwargs.setdefault("pool_pre_ping", True)
        self._engine = create_async_engine(self.url, **kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database engine created for %s", self._engine.url.render_as_string())

    async def create_tables(self) -> None:
        """Create any missing tables from the ORM metadata."""
        # Import models so they register on Base.metadata
        import src.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Provide a session, rolling back if the block raises."""
        if self._session_factory is None:
            raise RuntimeError("Database is not connected; call connect() first")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
