"""Database connection and session management.

Provides async database engine and session factory for PostgreSQL.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from arcana.config import Settings


def async_database_url(url: str) -> str:
    """Force the asyncpg driver onto a plain PostgreSQL URL."""
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix) :]
    return url


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async database engine.

    Args:
        settings: Application settings with database URL

    Returns:
        Configured async engine
    """
    return create_async_engine(
        async_database_url(settings.database.url),
        echo=settings.debug,  # Log SQL queries in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory.

    Args:
        engine: Database engine

    Returns:
        Session factory for creating database sessions
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


class DatabaseProbe:
    """Readiness check for the backing database."""

    async def ping(self) -> bool:
        raise NotImplementedError


class EngineDatabaseProbe(DatabaseProbe):
    """Ping PostgreSQL through the engine's pool."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    async def ping(self) -> bool:
        """Run `SELECT 1`. Connection errors propagate to the caller."""
        async with self.engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
        return True


class InMemoryDatabaseProbe(DatabaseProbe):
    """Probe for in-memory persistence; tests flip `healthy` to simulate outages."""

    def __init__(self, healthy: bool = True) -> None:
        self.healthy = healthy

    async def ping(self) -> bool:
        return self.healthy
