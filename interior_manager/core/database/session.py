"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from interior_manager.core.logging_config import get_logger
from interior_manager.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

engine = create_engine(settings.database.url, echo=settings.database.echo)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database.

    On SQLite (local development) the tables are created from the ORM
    metadata. Postgres deployments are migrated with Alembic before the
    server starts, so nothing is created here.
    """
    if engine.dialect.name == "sqlite":
        await create_all(engine)
        logger.info("SQLite schema created from ORM metadata")
    else:
        logger.info(f"Skipping create_all on {engine.dialect.name}; schema is managed by Alembic")
