"""
UYNM Backend — Database Session Management
============================================

What:  Async SQLAlchemy engine + session factory for the managed Postgres store,
       wrapped in an explicitly constructed `Database` object.
How:   create_app() builds one Database from settings (or receives one from the
       caller, e.g. tests with aiosqlite) and stores it on `app.state`. The
       request dependency in dependencies.py opens one session per request.
Who:   Services receive the AsyncSession; nothing imports a global engine.

Connection Pooling:
    pool_size / max_overflow come from settings. Supabase's pooler limits
    concurrent connections per project, so defaults are deliberately small.
    SQLite URLs (tests) skip pool arguments, which SQLite's pool rejects.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from uynm_api.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the models, Alembic autogenerate and
    the test fixtures that call `Base.metadata.create_all`.
    """
    pass


class Database:
    """
    Owns the async engine and session factory for one application instance.

    Usage:
        database = Database.from_settings(settings)
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings, url: Optional[str] = None) -> "Database":
        url = url or settings.database_url
        kwargs = {"echo": settings.log_level == "DEBUG"}
        if not url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=1800,
            )
        return cls(create_async_engine(url, **kwargs))

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create every table from model metadata (tests and local bootstrap only)."""
        # Import for side effects: registers every model with Base.metadata
        from uynm_api import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections (called on application shutdown)."""
        await self.engine.dispose()


@asynccontextmanager
async def session_scope(database: Database) -> AsyncIterator[AsyncSession]:
    """
    Yield one session and roll back if the caller raises.

    What:    Request-scoped session lifecycle used by the FastAPI dependency.
    How:     Services commit explicitly after each logical mutation; anything
             left uncommitted when an exception propagates is rolled back, and
             the session always returns its connection to the pool.
    """
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
