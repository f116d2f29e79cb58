"""Database connection and session management."""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional, Union

from sqlalchemy import event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from contact_passports.config import Settings
from contact_passports.core.exceptions import ConfigurationError
from contact_passports.models import Base
from contact_passports.utils.logging import get_logger

logger = get_logger(__name__)

# Async drivers used for each backend
ASYNC_DRIVERS = {
    "postgresql": "asyncpg",
    "postgres": "asyncpg",
    "sqlite": "aiosqlite",
}


def normalize_database_url(url: Union[str, URL]) -> URL:
    """Parse a database URL and switch it to the backend's async driver.

    ``postgresql://`` becomes ``postgresql+asyncpg://`` and ``sqlite://``
    becomes ``sqlite+aiosqlite://``. URLs that already name a driver are kept.
    """
    if not url:
        raise ConfigurationError("database_url is not set")

    try:
        parsed = make_url(url)
    except ArgumentError as e:
        raise ConfigurationError(f"Invalid database URL: {url}") from e

    backend, _, driver = parsed.drivername.partition("+")
    if not driver and backend in ASYNC_DRIVERS:
        if backend == "postgres":
            backend = "postgresql"
        parsed = parsed.set(drivername=f"{backend}+{ASYNC_DRIVERS[backend]}")
    return parsed


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """Turn on foreign key enforcement for each new SQLite connection."""
    _ = connection_record  # Required by SQLAlchemy but not used
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Storage handle owning the async engine and its session factory.

    Created once by the process entry point and handed to repositories.
    """

    def __init__(
        self,
        url: Union[str, URL],
        *,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
    ) -> None:
        """Create the engine and session factory for ``url``."""
        self.url = normalize_database_url(url)

        if self.is_sqlite:
            # SQLite doesn't support these pool settings
            self.engine: AsyncEngine = create_async_engine(self.url, echo=echo)
            event.listen(
                self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys
            )
        else:
            self.engine = create_async_engine(
                self.url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
                echo=echo,
            )

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

        logger.debug(
            "database_configured",
            url=self.url.render_as_string(hide_password=True),
            dialect=self.dialect_name,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle from application settings."""
        return cls(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    @property
    def is_sqlite(self) -> bool:
        """Check if we're using SQLite."""
        return self.url.get_backend_name() == "sqlite"

    @property
    def dialect_name(self) -> str:
        """Name of the SQL dialect, e.g. ``postgresql`` or ``sqlite``."""
        return str(self.engine.dialect.name)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get asynchronous database session.

        Commits when the block exits normally, rolls back on error.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except (SQLAlchemyError, TypeError, ValueError):
                await session.rollback()
                raise

    @asynccontextmanager
    async def transaction(
        self, isolation_level: Optional[str] = None
    ) -> AsyncGenerator[AsyncSession, None]:
        """Get a session whose transaction runs at ``isolation_level``.

        The level is pinned on the session's connection before any statement
        runs, so it covers the whole transaction.
        """
        async with self.session_factory() as session:
            try:
                if isolation_level:
                    await session.connection(
                        execution_options={"isolation_level": isolation_level}
                    )
                yield session
                await session.commit()
            except (SQLAlchemyError, TypeError, ValueError):
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Initialize database with tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_created", dialect=self.dialect_name)

    async def drop_all(self) -> None:
        """Drop all database tables (use with caution)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("database_tables_dropped", dialect=self.dialect_name)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
