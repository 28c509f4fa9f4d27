"""Database initialization and dependency injection."""

import logging
from typing import AsyncGenerator, List

import fastapi
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.database import (
    DatabaseManager,
    ProbeResult,
    ensure_column,
    probe_sqlite_pragmas,
    summarize_probes,
)
# Import all models to ensure they're registered
import components.account.models
import components.installment.models
import components.ledger.models

logger = logging.getLogger(__name__)

# Columns added after the first release; older databases get them on startup.
LATE_COLUMNS = (
    ("debts", "phone", "VARCHAR(32)"),
    ("credits", "phone", "VARCHAR(32)"),
)

# Create a single instance of DatabaseManager
db_manager = DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with db_manager.get_db() as session:
        yield session


async def prepare_database(manager: DatabaseManager, apply_pragmas: bool = True) -> List[ProbeResult]:
    """
    Create missing tables and run the schema compatibility probes.

    Each probe reports its own outcome; the combined result is logged once
    and returned so callers can decide what to do with failures.
    """
    await manager.create_all()
    results: List[ProbeResult] = []
    async with manager.engine.begin() as conn:
        if apply_pragmas and conn.dialect.name == "sqlite":
            results.extend(await probe_sqlite_pragmas(conn))
        for table, column, ddl_type in LATE_COLUMNS:
            results.append(await ensure_column(conn, table, column, ddl_type))

    failed = [result.name for result in results if not result.ok]
    if failed:
        logger.warning("Database ready with unsupported features: %s", ", ".join(failed))
    else:
        logger.info("Database ready: %s", summarize_probes(results))
    return results


def init_db(app: fastapi.FastAPI) -> None:
    """Initialize database connection."""
    settings = get_settings()

    @app.on_event("startup")
    async def _startup() -> None:
        app.state.db_probes = await prepare_database(db_manager, apply_pragmas=settings.SQLITE_PRAGMAS)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await db_manager.dispose()
