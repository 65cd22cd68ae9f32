"""Async SQLAlchemy engine for the postgres state backend.

The engine only connects on first use; with
STATE_BACKEND=memory nothing here ever opens a connection.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def check_connection() -> None:
    """Fail fast at startup if DATABASE_URL is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
