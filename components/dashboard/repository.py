"""Repository for dashboard totals and monthly trend series."""

from typing import Optional

import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.clock import SystemClock
from components.dashboard import schemas
from components.dashboard.aggregator import bucket_by_month, overlay_series
from components.installment.models import Installment, InstallmentPayment
from components.jalali.adapter import JalaliDateAdapter, default_adapter
from components.ledger.models import Check, Credit, Debt, Expense


class DashboardRepository:
    """Repository for dashboard data."""

    def __init__(self, session: AsyncSession, adapter: Optional[JalaliDateAdapter] = None, clock=None):
        """Initialize repository with database session."""
        self.session = session
        self.adapter = adapter or default_adapter()
        self.clock = clock or SystemClock()

    async def get_summary(self) -> schemas.FinancialSummary:
        """
        Get dashboard totals.

        Returns:
        - Sum of unpaid debts
        - Sum of credits not yet received
        - Number of pending checks
        - Sum of installment amounts due in the current Jalali month
        - Net balance (credits minus debts)
        """
        debts = (await self.session.execute(select(Debt).where(Debt.is_paid.is_(False)))).scalars().all()
        credits = (await self.session.execute(select(Credit).where(Credit.is_received.is_(False)))).scalars().all()
        checks = (await self.session.execute(select(Check).where(Check.status == "pending"))).scalars().all()

        total_debts = sum(float(debt.amount or 0) for debt in debts)
        total_credits = sum(float(credit.amount or 0) for credit in credits)

        current_month = self.adapter.month_key(self.clock.now())
        result = await self.session.execute(
            select(InstallmentPayment.due_date, Installment.installment_amount)
            .join(Installment, InstallmentPayment.installment_id == Installment.id)
        )
        monthly_total = sum(
            float(amount or 0)
            for due_date, amount in result.all()
            if self.adapter.month_key(due_date) == current_month
        )

        return schemas.FinancialSummary(
            total_debts=total_debts,
            total_credits=total_credits,
            pending_checks=len(checks),
            monthly_installments_total=monthly_total,
            net_balance=total_credits - total_debts,
            current_month=current_month,
        )

    async def get_trends_frame(self, months_back: int) -> pd.DataFrame:
        """Monthly sums of expenses, installment dues, debts and credits, one column each."""
        now = self.clock.now()

        expenses = (await self.session.execute(select(Expense))).scalars().all()
        debts = (await self.session.execute(select(Debt))).scalars().all()
        credits = (await self.session.execute(select(Credit))).scalars().all()
        installment_rows = (await self.session.execute(
            select(InstallmentPayment.due_date, Installment.installment_amount)
            .join(Installment, InstallmentPayment.installment_id == Installment.id)
        )).all()

        def by_due_date(rows, amount=lambda row: row.amount):
            return bucket_by_month(
                rows, lambda row: row.due_date, amount,
                months_back=months_back, now=now, adapter=self.adapter,
            )

        series = {
            "expenses": by_due_date(expenses),
            "installments": by_due_date(installment_rows, amount=lambda row: row.installment_amount),
            "debts": by_due_date(debts),
            "credits": by_due_date(credits),
        }
        labels = series["expenses"].labels
        return overlay_series(labels, {name: values.values for name, values in series.items()})

    async def get_trends(self, months_back: int) -> schemas.MonthlyTrends:
        frame = await self.get_trends_frame(months_back)
        labels = [str(label) for label in frame.index]
        return schemas.MonthlyTrends(
            labels=labels,
            month_names=[self.adapter.month_label(label) for label in labels],
            series={column: [float(value) for value in frame[column]] for column in frame.columns},
        )
