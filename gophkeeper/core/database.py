"""GophKeeper database configuration - async SQLAlchemy."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from gophkeeper.core.config import Settings

# Base class for models
Base = declarative_base()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine with the configured pool settings."""
    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,  # Verify connection before use
        echo=settings.debug and settings.log_level == "DEBUG",
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get a database session for one request.

    Commits when the handler returns, rolls back on any error.
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            # BaseException so cancellation also rolls back
            await session.rollback()
            raise


async def check_db_connection(engine: AsyncEngine) -> bool:
    """Check if database is reachable."""
    from gophkeeper.core.logging import get_logger

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True
    except (OSError, ConnectionError) as e:
        get_logger("database").debug(f"Database connection check failed: {e}")
        return False
    except Exception as e:
        get_logger("database").warning(f"Unexpected error checking database connection: {e}")
        return False
