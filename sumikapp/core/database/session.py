"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from sumikapp.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = logging.getLogger(__name__)

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

    Creates missing tables when ``SUMIKAPP_DATABASE_AUTO_CREATE`` is enabled.
    In production the Alembic migrations under ``alembic/versions`` own the
    schema and this function does nothing.
    """
    if not settings.database.auto_create:
        logger.info("Skipping table creation; schema is managed by Alembic migrations")
        return
    await create_all(engine)
    logger.info("Database tables created from ORM metadata")
