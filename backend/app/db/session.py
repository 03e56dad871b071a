"""
Document store session configuration.

This module handles engine creation and session management using
SQLAlchemy with async support (PostgreSQL in production).
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from backend.app.core.config import settings


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to pooled drivers."""
    engine_kwargs = {"echo": echo, "future": True}
    if not database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["max_overflow"] = settings.db_max_overflow
    return create_async_engine(database_url, **engine_kwargs)


# Create async engine
engine = build_engine(settings.database_url, echo=settings.db_echo)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    Uncommitted work is rolled back when the session closes.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
