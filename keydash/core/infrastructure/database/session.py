"""Database handle and session management."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, Request
from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from keydash.core.config import Settings
from keydash.core.infrastructure.health import DatabaseHealthResult, HealthStatus


class Database:
    """Owns the engine (and its connection pool) for the process lifetime.

    Created once in the application lifespan and disposed on shutdown.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._sessionmaker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine = create_async_engine(
            settings.SQLALCHEMY_DATABASE_URI,
            echo=settings.ENVIRONMENT == "local" and settings.LOG_LEVEL == "DEBUG",
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
        return cls(engine)

    async def connect(self) -> None:
        """Verify that the database is reachable."""
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection established successfully")
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    async def run_migrations(self) -> None:
        """Create the pgcrypto extension and every table that is missing.

        Runs once at startup; table models must be imported beforehand so
        they are registered on SQLModel.metadata.
        """
        async with self.engine.begin() as conn:
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS pgcrypto"))
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info(
            f"Schema ready: {', '.join(sorted(SQLModel.metadata.tables))}"
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session wrapped in a transaction.

        Commits on clean exit, rolls back when the block raises.
        """
        async with self._sessionmaker() as session:
            async with session.begin():
                yield session

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection pool disposed")

    async def check_health(self) -> DatabaseHealthResult:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text("SELECT version()"))
                version = result.scalar()

                ext_result = await conn.execute(
                    text("SELECT extname FROM pg_extension WHERE extname = 'pgcrypto'")
                )
                has_pgcrypto = ext_result.scalar() is not None

                return DatabaseHealthResult(
                    status=HealthStatus.OK,
                    connected=True,
                    version=version.split(",")[0] if version else "unknown",
                    pgcrypto=has_pgcrypto,
                )
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return DatabaseHealthResult(
                status=HealthStatus.ERROR,
                connected=False,
                error=str(e),
            )


def get_database(request: Request) -> Database:
    """Get the database handle created by the application lifespan."""
    return request.app.state.db


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session with automatic transaction management."""
    async with database.session() as session:
        yield session
