"""Unit tests for engine, session factory and table creation helpers."""

from __future__ import annotations

from datetime import timezone

import pytest
from sqlalchemy import DateTime, inspect

from sumikapp.core.database import Base, create_all, create_engine, create_sessionmaker, utc_now
from sumikapp.core.database.entities import User


@pytest.mark.parametrize(
    "url",
    [
        "postgres://user:pw@db:5432/sumikapp",
        "postgresql://user:pw@db:5432/sumikapp",
        "postgresql+psycopg2://user:pw@db:5432/sumikapp",
        "postgresql+asyncpg://user:pw@db:5432/sumikapp",
    ],
)
def test_postgres_urls_use_asyncpg(url):
    engine = create_engine(url)

    assert engine.url.drivername == "postgresql+asyncpg"
    assert engine.url.database == "sumikapp"


def test_sqlite_url_is_unchanged():
    engine = create_engine("sqlite+aiosqlite:///:memory:")

    assert engine.url.drivername == "sqlite+aiosqlite"


def test_sessionmaker_keeps_objects_loaded_after_commit():
    factory = create_sessionmaker(create_engine("sqlite+aiosqlite:///:memory:"))

    assert factory.kw["expire_on_commit"] is False


@pytest.mark.asyncio
async def test_create_all_registers_every_table():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    try:
        await create_all(engine)
        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    finally:
        await engine.dispose()

    assert {
        "users",
        "program_batch",
        "internship_details",
        "weekly_reports",
        "requirements_history",
        "employability_predictions",
        "recent_activity",
    } <= tables


def test_utc_now_is_timezone_aware():
    assert utc_now().tzinfo is timezone.utc


def test_every_timestamp_column_is_timezone_aware():
    timestamp_columns = {
        f"{table.name}.{column.name}": column.type.timezone
        for table in Base.metadata.sorted_tables
        for column in table.columns
        if isinstance(column.type, DateTime)
    }

    assert User.__table__.c.created_at.type.timezone is True
    assert "weekly_reports.supervisor_approved_at" in timestamp_columns
    assert all(timestamp_columns.values())
