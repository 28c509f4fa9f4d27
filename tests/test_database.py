from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.core.database import DatabaseManager, ensure_column
from components.core.init_db import prepare_database


async def test_prepare_database_reports_probes(db_manager):
    results = await prepare_database(db_manager)
    names = {result.name: result for result in results}

    assert names["debts.phone"].ok
    assert names["debts.phone"].detail == "present"
    assert "PRAGMA foreign_keys = ON" in names


async def test_missing_phone_column_is_added():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.execute(text("CREATE TABLE debts (id INTEGER PRIMARY KEY, person_name VARCHAR(200))"))
        result = await ensure_column(conn, "debts", "phone", "VARCHAR(32)")
        columns = [row[1] for row in (await conn.execute(text("PRAGMA table_info(debts)"))).all()]
    await engine.dispose()

    assert result.ok
    assert result.detail == "added"
    assert "phone" in columns


async def test_unknown_table_is_reported_not_raised():
    manager = DatabaseManager(create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool))
    async with manager.engine.begin() as conn:
        result = await ensure_column(conn, "nope", "phone", "VARCHAR(32)")
    await manager.dispose()

    assert not result.ok
