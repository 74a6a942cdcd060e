"""Database abstraction layer using SQLAlchemy 2.0 async.

The engine is built from the URL chosen in settings: PostgreSQL (asyncpg)
when the environment configures one, SQLite (aiosqlite) otherwise. The
choice happens once, when the engine is first created.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from rollcall.core.config import Settings, get_settings
from rollcall.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def sqlite_pragmas(settings: Settings) -> list[str]:
    """PRAGMA statements applied to every new SQLite connection."""
    pragmas = [
        "PRAGMA journal_mode = WAL",
        "PRAGMA synchronous = NORMAL",
        "PRAGMA cache_size = 10000",
        "PRAGMA temp_store = MEMORY",
        "PRAGMA mmap_size = 268435456",
        "PRAGMA foreign_keys = ON",
        "PRAGMA recursive_triggers = ON",
    ]
    if settings.is_production:
        pragmas.append("PRAGMA trusted_schema = OFF")
    return pragmas


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` for the selected backend."""
    if settings.database_backend == "sqlite":
        return {
            "echo": settings.db_echo,
            "connect_args": {"check_same_thread": False},
        }

    connect_args: dict[str, Any] = {}
    if settings.database_ssl:
        connect_args["ssl"] = "require"
    return {
        "echo": settings.db_echo,
        "pool_size": settings.database_max_connections,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": True,
        "connect_args": connect_args,
    }


def _install_sqlite_pragmas(engine: AsyncEngine, pragmas: list[str]) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragmas(dbapi_connection, connection_record):  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        try:
            for pragma in pragmas:
                cursor.execute(pragma)
        finally:
            cursor.close()


class DatabaseManager:
    """Database connection and session manager.

    Owns the async engine and session factory for the process.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            url = self.settings.sqlalchemy_url
            self._engine = create_async_engine(url, **engine_options(self.settings))

            if self.settings.database_backend == "sqlite":
                _install_sqlite_pragmas(self._engine, sqlite_pragmas(self.settings))
                logger.info("Using SQLite database configuration", path=url.database)
            else:
                logger.info(
                    "Using PostgreSQL database configuration",
                    database_url=url.render_as_string(hide_password=True),
                    pool_size=self.settings.database_max_connections,
                    ssl=self.settings.database_ssl,
                )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """Drop all database tables.

        WARNING: This will delete all data. Only use in testing!
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            logger.warning("Database tables dropped")

    async def disconnect(self) -> None:
        """Dispose of the engine and all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session that is rolled back if the block raises.

        Example:
            async with db.session() as session:
                result = await session.execute(select(UserModel))
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Check if the database answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the process-wide database manager."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a database session per request."""
    db = get_db_manager()
    async with db.session() as session:
        yield session


async def init_database() -> None:
    """Prepare the database on startup.

    Creates the SQLite directory when needed, verifies connectivity and
    creates any missing tables.
    """
    # Register all models with Base.metadata before create_all
    from rollcall.infrastructure.persistence import models  # noqa: F401

    db = get_db_manager()
    settings = db.settings

    sqlite_file = settings.sqlite_file
    if sqlite_file is not None:
        sqlite_file.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Database directory ready", path=str(sqlite_file.parent))

    if not await db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    await db.create_tables()


async def close_database() -> None:
    """Close the database connection on shutdown."""
    db = get_db_manager()
    await db.disconnect()
