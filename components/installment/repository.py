"""Repository for installment plan operations."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.clock import SystemClock
from components.core.database import atomic
from components.core.exceptions import PaymentNotFoundError, PlanNotFoundError
from components.installment import schemas
from components.installment.models import Installment, InstallmentPayment
from components.installment.reconciler import PlanLocks, plan_locks, plan_occurrences
from components.installment.schedule import generate_schedule, validate_schedule_params
from components.jalali.adapter import JalaliDateAdapter, default_adapter, ensure_aware

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = ("start_date", "installment_count", "due_day")


class InstallmentRepository:
    """Repository for installment plans and their payment occurrences."""

    def __init__(
        self,
        session: AsyncSession,
        adapter: Optional[JalaliDateAdapter] = None,
        clock=None,
        locks: Optional[PlanLocks] = None,
    ):
        """Initialize repository with database session."""
        self.session = session
        self.adapter = adapter or default_adapter()
        self.clock = clock or SystemClock()
        self.locks = locks or plan_locks

    async def get(self, plan_id: int) -> Optional[Installment]:
        result = await self.session.execute(
            select(Installment).where(Installment.id == plan_id)
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, plan_id: int) -> Installment:
        plan = await self.get(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return plan

    async def list(self) -> List[Installment]:
        """All plans, newest first."""
        result = await self.session.execute(
            select(Installment).order_by(Installment.created_at.desc(), Installment.id.desc())
        )
        return list(result.scalars().all())

    async def create(self, data: schemas.InstallmentCreate) -> Installment:
        """
        Create a plan and its full payment schedule in one transaction.

        When no due day is given the Jalali day of the start date is used.
        """
        due_day = data.due_day if data.due_day is not None else self.adapter.day_of_month(data.start_date)
        validate_schedule_params(data.installment_count, due_day)
        now = self.clock.now()

        plan = Installment(
            title=data.title.strip(),
            installment_amount=data.installment_amount,
            installment_count=data.installment_count,
            total_amount=data.installment_amount * data.installment_count,
            start_date=self.adapter.coerce_instant(data.start_date),
            due_day=due_day,
            description=data.description,
            paid_count=0,
            is_paid=False,
            created_at=now,
            updated_at=now,
        )
        async with atomic(self.session):
            self.session.add(plan)
            await self.session.flush()
            schedule = generate_schedule(plan.start_date, plan.installment_count, due_day, adapter=self.adapter)
            await self._insert_payments(plan.id, [
                {"month_index": index, "due_date": due_date, "is_paid": False, "paid_at": None}
                for index, due_date in enumerate(schedule, start=1)
            ])
        logger.info("Created installment plan %s with %s payments", plan.id, plan.installment_count)
        return plan

    async def update(self, plan_id: int, patch: schemas.InstallmentUpdate) -> Installment:
        """
        Apply a partial update.

        The total amount is recomputed from amount and count. If the start
        date, count or due day changed, the schedule is resynchronized inside
        the same transaction.
        """
        # null leaves a field unchanged, except description which it clears
        changes = {
            field: value
            for field, value in patch.model_dump(exclude_unset=True).items()
            if value is not None or field == "description"
        }
        async with self.locks(plan_id):
            plan = await self.get_or_raise(plan_id)
            if "start_date" in changes:
                changes["start_date"] = self.adapter.coerce_instant(changes["start_date"])

            resync = any(
                field in changes and changes[field] != self._current(plan, field)
                for field in SCHEDULE_FIELDS
            )
            count = changes.get("installment_count", plan.installment_count)
            due_day = changes.get("due_day", plan.due_day)
            validate_schedule_params(count, due_day)

            async with atomic(self.session):
                for field, value in changes.items():
                    if field == "title":
                        value = value.strip()
                    setattr(plan, field, value)
                plan.total_amount = Decimal(plan.installment_amount) * plan.installment_count
                plan.updated_at = self.clock.now()
                await self.session.flush()
                if resync:
                    await self._resync(plan)
        return plan

    async def delete(self, plan_id: int) -> None:
        """Delete a plan together with its payments."""
        async with self.locks(plan_id):
            plan = await self.get_or_raise(plan_id)
            async with atomic(self.session):
                await self.session.execute(
                    delete(InstallmentPayment).where(InstallmentPayment.installment_id == plan_id)
                )
                await self.session.delete(plan)
        self.locks.discard(plan_id)
        logger.info("Deleted installment plan %s", plan_id)

    async def get_payments(self, plan_id: int) -> List[InstallmentPayment]:
        await self.get_or_raise(plan_id)
        result = await self.session.execute(
            select(InstallmentPayment)
            .where(InstallmentPayment.installment_id == plan_id)
            .order_by(InstallmentPayment.month_index)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def toggle_payment(self, plan_id: int, month_index: int, paid: bool) -> InstallmentPayment:
        """Mark one payment paid (stamped with the clock) or unpaid, then refresh plan totals."""
        async with self.locks(plan_id):
            plan = await self.get_or_raise(plan_id)
            result = await self.session.execute(
                select(InstallmentPayment).where(
                    InstallmentPayment.installment_id == plan_id,
                    InstallmentPayment.month_index == month_index,
                )
                .execution_options(populate_existing=True)
            )
            payment = result.scalar_one_or_none()
            if payment is None:
                raise PaymentNotFoundError(plan_id, month_index)

            async with atomic(self.session):
                payment.is_paid = paid
                payment.paid_at = self.clock.now() if paid else None
                await self.session.flush()
                paid_count = await self.session.scalar(
                    select(func.count(InstallmentPayment.id)).where(
                        InstallmentPayment.installment_id == plan_id,
                        InstallmentPayment.is_paid.is_(True),
                    )
                )
                await self._update_summary(plan, paid_count or 0)
        return payment

    async def reconcile(self, plan_id: int) -> None:
        """
        Regenerate a plan's payments after its schedule parameters changed.

        A plan that no longer exists is left alone: nothing is raised and
        nothing is written.
        """
        async with self.locks(plan_id):
            plan = await self.get(plan_id)
            if plan is not None:
                async with atomic(self.session):
                    await self._resync(plan)
        if plan is None:
            self.locks.discard(plan_id)
            logger.debug("Reconcile skipped, installment plan %s not found", plan_id)

    async def schedule_for(self, plan_id: int) -> List[datetime]:
        """Due dates the plan's current parameters produce."""
        plan = await self.get_or_raise(plan_id)
        return generate_schedule(plan.start_date, plan.installment_count, plan.due_day, adapter=self.adapter)

    async def _resync(self, plan: Installment) -> None:
        result = await self.session.execute(
            select(InstallmentPayment.paid_at)
            .where(
                InstallmentPayment.installment_id == plan.id,
                InstallmentPayment.is_paid.is_(True),
            )
            .order_by(InstallmentPayment.month_index)
        )
        prior_paid_at = [ensure_aware(paid_at) if paid_at else None for paid_at in result.scalars().all()]

        drafts = plan_occurrences(
            ensure_aware(plan.start_date),
            plan.installment_count,
            plan.due_day,
            prior_paid_at,
            now=self.clock.now(),
            adapter=self.adapter,
        )
        await self.session.execute(
            delete(InstallmentPayment).where(InstallmentPayment.installment_id == plan.id)
        )
        await self._insert_payments(plan.id, [
            {
                "month_index": draft.month_index,
                "due_date": draft.due_date,
                "is_paid": draft.is_paid,
                "paid_at": draft.paid_at,
            }
            for draft in drafts
        ])
        paid_count = sum(1 for draft in drafts if draft.is_paid)
        await self._update_summary(plan, paid_count)
        logger.info(
            "Reconciled installment plan %s: %s payments, %s kept paid (previously %s)",
            plan.id, len(drafts), paid_count, len(prior_paid_at),
        )

    async def _insert_payments(self, plan_id: int, rows: List[dict]) -> None:
        if not rows:
            return
        await self.session.execute(
            insert(InstallmentPayment),
            [{"installment_id": plan_id, **row} for row in rows],
        )

    async def _update_summary(self, plan: Installment, paid_count: int) -> None:
        plan.paid_count = paid_count
        plan.is_paid = paid_count >= plan.installment_count
        plan.updated_at = self.clock.now()
        await self.session.flush()

    def _current(self, plan: Installment, field: str):
        value = getattr(plan, field)
        if field == "start_date":
            return ensure_aware(value)
        return value
