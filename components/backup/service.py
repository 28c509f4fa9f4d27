"""JSON backup and restore of every table."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Type

from sqlalchemy import Boolean, DateTime, Numeric, delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.core.clock import SystemClock
from components.core.database import Base, atomic
from components.core.exceptions import BackupFormatError
from components.installment.models import Installment, InstallmentPayment
from components.jalali.adapter import to_utc
from components.ledger.models import Check, Credit, Debt, Expense

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1

# Parents before children; restore deletes in reverse order.
TABLES: Dict[str, Type[Base]] = {
    "installments": Installment,
    "installment_payments": InstallmentPayment,
    "debts": Debt,
    "credits": Credit,
    "checks": Check,
    "expenses": Expense,
    "accounts": Account,
}


def _dump_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_utc(value).isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _load_value(column, value: Any) -> Any:
    if value is None:
        return None
    if isinstance(column.type, DateTime):
        if isinstance(value, datetime):
            return to_utc(value)
        try:
            return to_utc(datetime.fromisoformat(str(value)))
        except ValueError as exc:
            raise BackupFormatError(f"Invalid date in column {column.name}: {value!r}") from exc
    if isinstance(column.type, Boolean):
        return bool(value)
    if isinstance(column.type, Numeric):
        return Decimal(str(value))
    return value


class BackupService:
    """Export all tables to a JSON-ready document and restore from one."""

    def __init__(self, session: AsyncSession, clock=None):
        """Initialize service with database session."""
        self.session = session
        self.clock = clock or SystemClock()

    async def export_all(self) -> Dict[str, Any]:
        """Every table as a list of rows keyed by column name, plus a meta header."""
        document: Dict[str, Any] = {
            "meta": {"exported_at": self.clock.now().isoformat(), "version": BACKUP_VERSION},
        }
        for name, model in TABLES.items():
            columns = model.__table__.columns
            result = await self.session.execute(select(model.__table__).order_by(model.__table__.c.id))
            document[name] = [
                {column.name: _dump_value(row[column.name]) for column in columns}
                for row in result.mappings().all()
            ]
        logger.info(
            "Exported backup: %s",
            ", ".join(f"{name}={len(document[name])}" for name in TABLES),
        )
        return document

    async def import_all(self, document: Dict[str, Any]) -> Dict[str, int]:
        """
        Replace the contents of every table with the rows in `document`.

        Missing table arrays restore as empty tables. All deletes and inserts
        run in one transaction.

        Raises:
            BackupFormatError: The document is not an object, a table entry
                is not a list of objects, or meta.version is newer than this
                build understands.
        """
        if not isinstance(document, dict):
            raise BackupFormatError("Backup must be a JSON object")
        meta = document.get("meta") or {}
        version = meta.get("version", BACKUP_VERSION) if isinstance(meta, dict) else None
        if not isinstance(version, int) or version > BACKUP_VERSION:
            raise BackupFormatError(f"Unsupported backup version: {version!r}")

        rows_by_table = {name: self._rows(name, model, document.get(name) or []) for name, model in TABLES.items()}

        async with atomic(self.session):
            for model in reversed(list(TABLES.values())):
                await self.session.execute(delete(model.__table__))
            for name, model in TABLES.items():
                # rows may carry different column subsets, so insert one at a time
                for row in rows_by_table[name]:
                    await self.session.execute(insert(model.__table__).values(**row))
        # rows were replaced underneath the ORM
        self.session.expunge_all()

        counts = {name: len(rows) for name, rows in rows_by_table.items()}
        logger.info("Restored backup: %s", counts)
        return counts

    @staticmethod
    def _rows(name: str, model: Type[Base], raw_rows: Any) -> List[Dict[str, Any]]:
        if not isinstance(raw_rows, list):
            raise BackupFormatError(f"'{name}' must be a list")
        columns = model.__table__.columns
        rows = []
        for raw in raw_rows:
            if not isinstance(raw, dict):
                raise BackupFormatError(f"'{name}' rows must be objects")
            rows.append({
                column.name: _load_value(column, raw[column.name])
                for column in columns
                if column.name in raw
            })
        return rows
