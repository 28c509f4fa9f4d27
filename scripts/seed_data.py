"""Script to seed demo data into the database."""

import asyncio
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import AccountRepository
from components.account.schemas import AccountCreate
from components.core.clock import SystemClock
from components.core.init_db import db_manager, prepare_database
from components.core.logging_config import configure_logging
from components.installment.repository import InstallmentRepository
from components.installment.schemas import InstallmentCreate
from components.jalali.adapter import JalaliDateAdapter, default_adapter
from components.ledger import models, schemas
from components.ledger.repository import LedgerRepository

logger = logging.getLogger(__name__)


async def seed(session: AsyncSession, clock=None, adapter: Optional[JalaliDateAdapter] = None) -> Dict[str, int]:
    """Insert a small demo data set relative to the clock's current date."""
    clock = clock or SystemClock()
    adapter = adapter or default_adapter()
    now = clock.now()
    this_month = adapter.today(now)
    three_months_ago = adapter.from_jalali(adapter.add_months(this_month, -3, day=15))

    # Accounts
    accounts = AccountRepository(session, clock=clock)
    for title, bank, last4, balance in [
        ("حساب جاری", "ملت", "1234", Decimal("12500000")),
        ("حساب پس‌انداز", "ملی", "5678", Decimal("48000000")),
    ]:
        await accounts.create(AccountCreate(title=title, bank_name=bank, card_last4=last4, balance=balance))

    # Installment plans; the first payments of the older plan are already paid
    installments = InstallmentRepository(session, adapter=adapter, clock=clock)
    phone = await installments.create(InstallmentCreate(
        title="قسط گوشی",
        installment_amount=Decimal("2500000"),
        installment_count=12,
        start_date=three_months_ago,
        due_day=31,
    ))
    for month_index in (1, 2, 3):
        await installments.toggle_payment(phone.id, month_index, True)
    await installments.create(InstallmentCreate(
        title="وام مسکن",
        installment_amount=Decimal("8000000"),
        installment_count=24,
        start_date=now,
    ))

    # Ledger records
    await LedgerRepository(session, models.Debt, clock=clock).create(schemas.DebtCreate(
        person_name="علی رضایی",
        phone="09120000000",
        amount=Decimal("3000000"),
        due_date=now + timedelta(days=10),
    ))
    await LedgerRepository(session, models.Credit, clock=clock).create(schemas.CreditCreate(
        person_name="مریم احمدی",
        amount=Decimal("1500000"),
        due_date=now + timedelta(days=20),
    ))
    await LedgerRepository(session, models.Check, clock=clock).create(schemas.CheckCreate(
        check_number="100245",
        amount=Decimal("7000000"),
        bank_name="ملت",
        due_date=now + timedelta(days=30),
        type="payable",
        person_name="فروشگاه نور",
    ))
    expenses = LedgerRepository(session, models.Expense, clock=clock)
    for months_ago, amount in enumerate((Decimal("4200000"), Decimal("3900000"), Decimal("5100000"))):
        due = adapter.from_jalali(adapter.add_months(this_month, -months_ago, day=5))
        await expenses.create(schemas.ExpenseCreate(title="خرید ماهانه", amount=amount, due_date=due))

    counts = {"accounts": 2, "installments": 2, "debts": 1, "credits": 1, "checks": 1, "expenses": 3}
    logger.info("Seeded demo data: %s", counts)
    return counts


async def main() -> None:
    configure_logging()
    await prepare_database(db_manager)
    async with db_manager.get_db() as session:
        await seed(session)
    await db_manager.dispose()


if __name__ == "__main__":
    asyncio.run(main())
