"""Database engine, sessions and lifecycle management.

The store is an in-memory SQLite database by default. The engine is built
when the client connects and disposed on disconnect, so every application
lifespan starts from an empty store.
"""

from collections.abc import AsyncGenerator
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from ursol.core.config import settings
from ursol.core.exceptions import ConfigurationError
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given URL.

    In-memory SQLite needs a single shared connection, otherwise every new
    connection would see its own empty database.
    """
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.db.pool_size,
        max_overflow=settings.db.max_overflow,
    )


class DatabaseClient:
    """Database client with connection and schema management."""

    def __init__(self, url: str, echo: bool = False):
        """Initialize database client.

        Args:
            url: SQLAlchemy async database URL
            echo: Whether to log emitted SQL
        """
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    async def connect(self) -> None:
        """Create the engine and test the connection."""
        self.engine = build_engine(self.url, echo=self.echo)
        self.session_maker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            LOGGER.info("Database connection successful", extra={"url": self.url})
        except Exception:
            LOGGER.error("Database connection failed", exc_info=True)
            raise

    async def disconnect(self) -> None:
        """Dispose the engine. In-memory data is discarded."""
        if self.engine is None:
            return

        await self.engine.dispose()
        self.engine = None
        self.session_maker = None
        LOGGER.info("Database connection closed")

    async def create_tables(self) -> None:
        """Create all database tables from SQLAlchemy models."""
        # Model classes must be registered on Base.metadata before create_all
        from ursol.database import models  # noqa: F401

        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        LOGGER.info("Database tables created/verified successfully")

    async def drop_tables(self) -> None:
        """Drop all database tables.

        WARNING: This will delete all data!
        """
        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        LOGGER.warning("All database tables dropped")

    async def health_check(self) -> dict:
        """Check database health."""
        if self.engine is None:
            return {"status": "unhealthy", "connected": False, "error": "not connected"}

        try:
            async with self.engine.connect() as conn:
                val = await conn.scalar(text("SELECT 1"))

            return {
                "status": "healthy",
                "connected": True,
                "database": self.engine.dialect.name,
                "latency_test": "passed" if val == 1 else "failed",
            }
        except Exception as e:
            LOGGER.error("Database health check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "connected": False, "error": str(e)}

    def session(self) -> AsyncSession:
        """Open a new session bound to the current engine."""
        if self.session_maker is None:
            raise ConfigurationError("Database is not connected")
        return self.session_maker()

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    def _require_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise ConfigurationError("Database is not connected")
        return self.engine


# Global database client instance
db_client = DatabaseClient(settings.database_url, echo=settings.database_echo)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting async database session.

    Yields:
        AsyncSession: Database session
    """
    async with db_client.session() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_database(seed: bool = False) -> None:
    """Connect, create tables and optionally load the demo data set.

    Args:
        seed: Whether to insert the demo user and their entities
    """
    LOGGER.info("Initializing database connection...")
    await db_client.connect()
    await db_client.create_tables()

    if seed:
        from ursol.database.seed import seed_demo_data

        async with db_client.session() as session:
            await seed_demo_data(session)

    LOGGER.info("Database initialization completed")


async def close_database() -> None:
    """Close database connection."""
    try:
        LOGGER.info("Closing database connection...")
        await db_client.disconnect()
    except Exception as e:
        LOGGER.error("Error closing database", exc_info=True, extra={"error": str(e)})
