"""
Database engine and session management.

SQLAlchemy async engine (asyncpg in production, aiosqlite in tests) with a
session factory. Tables are created with create_all() when DB_AUTO_CREATE is
set; production deployments use migrations.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
import structlog

from reply_qualification.persistence.orm import Base


logger = structlog.get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    # SQLite only enforces ON DELETE CASCADE with this pragma
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the async engine and session factory.

    Usage:
        db = Database(settings.DATABASE_URL)
        async with db.session() as session:
            ...
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        """
        Args:
            url: SQLAlchemy async URL (postgresql+asyncpg://... or sqlite+aiosqlite://...)
            pool_size: Connection pool size (ignored for SQLite)
            max_overflow: Pool overflow (ignored for SQLite)
            echo: Log SQL statements
        """
        self.url = url
        self.is_sqlite = url.startswith("sqlite")

        if self.is_sqlite:
            # In-memory databases must share one connection
            self.engine: AsyncEngine = create_async_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_async_engine(
                url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )

        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session, rolling back if the block raises."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def check_connection(self) -> bool:
        """
        Check database connectivity with SELECT 1.

        Returns:
            True if the database answered, False otherwise
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database connection check failed", error=str(e))
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.debug("Database engine disposed")
