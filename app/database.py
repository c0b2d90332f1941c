"""
Async engine, session factory and declarative base.

PostgreSQL (asyncpg) is the deployment target; SQLite (aiosqlite) is used by
the test suite and for quick local runs.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import text, DateTime, Uuid, func
from app.config import settings
import logging
import uuid
from datetime import datetime
from typing import Any, AsyncGenerator, Dict

logger = logging.getLogger(__name__)

POSTGRES_POOL = {
    "pool_size": 10,
    "max_overflow": 20,
    "pool_pre_ping": True,
    "pool_recycle": 3600,
    "pool_timeout": 30,
}


def _engine_options() -> Dict[str, Any]:
    if settings.is_sqlite:
        return {"echo": settings.debug, "connect_args": {"check_same_thread": False}}

    return {
        "echo": settings.debug,
        **POSTGRES_POOL,
        "connect_args": {"server_settings": {"application_name": "real_estate_api"}},
    }


engine = create_async_engine(settings.database_url, **_engine_options())

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """
    Every marketplace table has a UUID key and creation/modification
    timestamps filled in by the database.
    """

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; anything left uncommitted is rolled back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def test_database_connection() -> bool:
    """Run ``SELECT 1``; used on startup and by ``/health``."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False

    logger.debug("Database connection successful")
    return True


async def _run_schema(action: str) -> None:
    # Importing the models registers their tables on Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(getattr(Base.metadata, action))
    logger.info(f"Schema {action} finished for {len(Base.metadata.tables)} tables")


async def create_tables():
    """Create missing tables; existing ones are left alone."""
    await _run_schema("create_all")


async def drop_tables():
    """
    Drop every marketplace table.

    Raises:
        RuntimeError: Outside development and testing
    """
    if not settings.is_testing and not settings.is_development:
        raise RuntimeError("Cannot drop tables in production environment")

    await _run_schema("drop_all")


async def close_db_connection():
    await engine.dispose()
    logger.info("Database connections closed")
