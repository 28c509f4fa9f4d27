"""Generic repository for debts, credits, checks and expenses."""

from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.clock import SystemClock
from components.core.database import atomic
from components.core.exceptions import RecordNotFoundError
from components.jalali.adapter import to_utc
from components.ledger.models import Check, Credit, Debt, Expense

ModelT = TypeVar("ModelT", Debt, Credit, Check, Expense)


class LedgerRepository(Generic[ModelT]):
    """CRUD for one ledger table; rows are listed by due date."""

    def __init__(self, session: AsyncSession, model: Type[ModelT], clock=None):
        """Initialize repository with database session and the mapped model."""
        self.session = session
        self.model = model
        self.clock = clock or SystemClock()

    @property
    def kind(self) -> str:
        return self.model.__name__

    async def get_all(self) -> List[ModelT]:
        result = await self.session.execute(
            select(self.model).order_by(self.model.due_date, self.model.id)
        )
        return list(result.scalars().all())

    async def get_by_id(self, record_id: int) -> Optional[ModelT]:
        result = await self.session.execute(
            select(self.model).where(self.model.id == record_id)
        )
        return result.scalar_one_or_none()

    async def create(self, data: BaseModel) -> ModelT:
        now = self.clock.now()
        record = self.model(**self._values(data.model_dump()), created_at=now, updated_at=now)
        async with atomic(self.session):
            self.session.add(record)
        return record

    async def update(self, record_id: int, data: BaseModel) -> ModelT:
        record = await self.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(self.kind, record_id)
        async with atomic(self.session):
            for field, value in self._values(data.model_dump(exclude_unset=True)).items():
                setattr(record, field, value)
            record.updated_at = self.clock.now()
        return record

    async def delete(self, record_id: int) -> None:
        record = await self.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(self.kind, record_id)
        async with atomic(self.session):
            await self.session.delete(record)

    @staticmethod
    def _values(values: dict) -> dict:
        # due dates are stored in UTC
        if values.get("due_date") is not None:
            values["due_date"] = to_utc(values["due_date"])
        return values
