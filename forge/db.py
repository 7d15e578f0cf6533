"""
Forge Database Layer
Async SQLModel engine and session factory for habits and habit logs.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from forge.config import settings

logger = logging.getLogger("forge")


def _get_connect_args() -> dict:
    """Get database-specific connection arguments."""
    if "sqlite" in settings.db_url:
        return {"check_same_thread": False}
    return {}


engine = create_async_engine(
    settings.db_url,
    echo=False,
    future=True,
    pool_pre_ping=True,  # Verify connections before use
    connect_args=_get_connect_args(),
)

async_session = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def create_db_and_tables():
    """Initialize the database schema."""
    # Table classes register on SQLModel.metadata at import
    import forge.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("db_tables_created", extra={"db_url": settings.db_url})


async def verify_database_connection() -> dict:
    """
    Health check for the database connection.
    """
    status = {"database": False, "errors": []}
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        status["database"] = True
    except Exception as e:
        logger.warning("db_health_check_failed", extra={"error": str(e)})
        status["errors"].append(str(e))
    return status
