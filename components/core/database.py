"""Core classes and mixins for DB connections"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, cast
from typing import Callable, AsyncContextManager

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from components.core import config
from components.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

settings = config.get_settings()
Base = declarative_base()
SessionMaker = Callable[[], AsyncContextManager[AsyncSession]]

SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys = ON",
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",
    "PRAGMA busy_timeout = 3000",
)


class DatabaseManager:
    def __init__(self, engine: Optional[AsyncEngine] = None) -> None:
        """Initialize DatabaseManager with optional engine for testing."""
        self.engine = engine or self._create_engine()

    def _create_engine(self) -> AsyncEngine:
        """Create async engine for the configured database."""
        if settings.is_sqlite:
            return create_async_engine(settings.DB_URL, echo=settings.DEBUG)
        return create_async_engine(
            settings.DB_URL,
            echo=settings.DEBUG,
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=5,
            max_overflow=10,
        )

    def get_session(self) -> SessionMaker:
        """Returns SessionMaker for database sessions."""
        if not self.engine:
            raise ValueError("Database engine wasn't initialized")

        return cast(
            SessionMaker,
            sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autocommit=False,
                autoflush=False,
            ),
        )

    @asynccontextmanager
    async def get_db(self) -> AsyncIterator[AsyncSession]:
        """Get database session context manager."""
        async_session = self.get_session()
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()

    async def create_all(self) -> None:
        """Create all tables registered on Base."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a unit of work as one transaction.

    Commits when the block finishes. On any failure the session is rolled
    back; database errors are re-raised as PersistenceError, everything else
    propagates unchanged.
    """
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.warning("Transaction rolled back: %s", exc)
        raise PersistenceError(str(exc)) from exc
    except BaseException:
        await session.rollback()
        raise


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single storage capability probe."""
    name: str
    ok: bool
    detail: str = ""


async def probe_sqlite_pragmas(conn: AsyncConnection) -> List[ProbeResult]:
    """Try each SQLite pragma and report which ones the driver accepted."""
    results = []
    for pragma in SQLITE_PRAGMAS:
        try:
            await conn.execute(text(pragma))
        except SQLAlchemyError as exc:
            result = ProbeResult(pragma, False, str(exc))
            logger.warning("SQLite pragma not applied: %s (%s)", pragma, exc)
        else:
            result = ProbeResult(pragma, True)
        results.append(result)
    return results


async def ensure_column(conn: AsyncConnection, table: str, column: str, ddl_type: str) -> ProbeResult:
    """
    Add `column` to `table` if an older database lacks it.

    Returns a ProbeResult describing what happened; the result detail is one
    of "present", "added" or the error text.
    """
    def _columns(sync_conn: Any) -> List[str]:
        return [col["name"] for col in inspect(sync_conn).get_columns(table)]

    name = f"{table}.{column}"
    try:
        existing = await conn.run_sync(_columns)
        if column in existing:
            return ProbeResult(name, True, "present")
        await conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl_type}"))
    except SQLAlchemyError as exc:
        logger.warning("Column migration failed for %s: %s", name, exc)
        return ProbeResult(name, False, str(exc))
    logger.info("Added missing column %s", name)
    return ProbeResult(name, True, "added")


def summarize_probes(results: List[ProbeResult]) -> Dict[str, bool]:
    return {result.name: result.ok for result in results}
