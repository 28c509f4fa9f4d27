from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from components.core.clock import FixedClock
from components.core.exceptions import (
    InvalidScheduleParamsError,
    PaymentNotFoundError,
    PersistenceError,
    PlanNotFoundError,
)
from components.installment.models import InstallmentPayment
from components.installment.repository import InstallmentRepository
from components.installment.schemas import InstallmentCreate, InstallmentUpdate
from components.jalali.adapter import JalaliDate, ensure_aware


async def payment_count(session):
    return await session.scalar(select(func.count(InstallmentPayment.id)))


@pytest.fixture
async def plan(installments, adapter):
    return await installments.create(InstallmentCreate(
        title=" Phone ",
        installment_amount=Decimal("2500000"),
        installment_count=6,
        start_date=adapter.from_jalali(JalaliDate(1404, 6, 31)),
    ))


async def test_create_generates_schedule(installments, plan, adapter):
    assert plan.title == "Phone"
    assert plan.due_day == 31
    assert plan.total_amount == Decimal("15000000")

    payments = await installments.get_payments(plan.id)
    assert [p.month_index for p in payments] == [1, 2, 3, 4, 5, 6]
    assert [adapter.to_jalali(p.due_date).day for p in payments] == [31, 30, 30, 30, 30, 30]
    assert not any(p.is_paid for p in payments)


async def test_create_rejects_bad_due_day(installments, adapter):
    with pytest.raises(InvalidScheduleParamsError):
        await installments.create(InstallmentCreate(
            title="Bad",
            installment_amount=Decimal("1"),
            installment_count=3,
            start_date=adapter.from_jalali(JalaliDate(1404, 1, 1)),
            due_day=40,
        ))
    assert await installments.list() == []


async def test_toggle_payment_updates_plan(installments, plan, clock):
    payment = await installments.toggle_payment(plan.id, 2, True)
    assert payment.is_paid
    assert ensure_aware(payment.paid_at) == clock.now()

    refreshed = await installments.get(plan.id)
    assert refreshed.paid_count == 1
    assert not refreshed.is_paid

    payment = await installments.toggle_payment(plan.id, 2, False)
    assert payment.paid_at is None
    assert (await installments.get(plan.id)).paid_count == 0


async def test_toggle_unknown_payment(installments, plan):
    with pytest.raises(PaymentNotFoundError):
        await installments.toggle_payment(plan.id, 7, True)
    with pytest.raises(PlanNotFoundError):
        await installments.toggle_payment(plan.id + 100, 1, True)


async def test_shrinking_count_keeps_paid_count_capped(installments, plan):
    for month_index in (1, 2, 3):
        await installments.toggle_payment(plan.id, month_index, True)

    updated = await installments.update(plan.id, InstallmentUpdate(installment_count=2))

    payments = await installments.get_payments(plan.id)
    assert len(payments) == 2
    assert all(p.is_paid for p in payments)
    assert updated.paid_count == 2
    assert updated.is_paid
    assert updated.total_amount == Decimal("5000000")


async def test_moving_start_date_keeps_paid_history(installments, plan, adapter, clock):
    await installments.toggle_payment(plan.id, 1, True)
    clock.instant = clock.now() + timedelta(days=30)
    await installments.toggle_payment(plan.id, 4, True)
    paid_at = {p.month_index: ensure_aware(p.paid_at) for p in await installments.get_payments(plan.id) if p.is_paid}

    clock.instant = clock.now() + timedelta(days=1)
    new_start = adapter.from_jalali(JalaliDate(1404, 8, 15))
    await installments.update(plan.id, InstallmentUpdate(start_date=new_start, due_day=15))

    payments = await installments.get_payments(plan.id)
    assert [p.is_paid for p in payments] == [True, True, False, False, False, False]
    # Timestamps move to the first positions in order
    assert [ensure_aware(p.paid_at) for p in payments[:2]] == [paid_at[1], paid_at[4]]
    assert adapter.to_jalali(payments[0].due_date) == JalaliDate(1404, 8, 15)
    assert (await installments.get(plan.id)).paid_count == 2


async def test_update_without_schedule_change_keeps_payments(installments, plan):
    before = [p.id for p in await installments.get_payments(plan.id)]
    await installments.update(plan.id, InstallmentUpdate(title="Laptop"))
    after = [p.id for p in await installments.get_payments(plan.id)]
    assert before == after


async def test_reconcile_missing_plan_is_noop(installments):
    await installments.reconcile(999)
    assert await payment_count(installments.session) == 0


async def test_reconcile_regenerates_from_stored_params(installments, plan):
    await installments.toggle_payment(plan.id, 1, True)
    await installments.reconcile(plan.id)
    payments = await installments.get_payments(plan.id)
    assert len(payments) == 6
    assert [p.is_paid for p in payments][:2] == [True, False]


async def test_delete_removes_payments(installments, plan):
    await installments.delete(plan.id)
    assert await installments.get(plan.id) is None
    assert await payment_count(installments.session) == 0
    with pytest.raises(PlanNotFoundError):
        await installments.delete(plan.id)


async def test_schedule_for_missing_plan(installments):
    with pytest.raises(PlanNotFoundError):
        await installments.schedule_for(1)


async def test_failed_reconcile_keeps_previous_payments(installments, plan, monkeypatch):
    await installments.toggle_payment(plan.id, 1, True)
    insert = installments._insert_payments

    async def insert_twice(plan_id, rows):
        # duplicate month indexes violate uq_installment_month
        await insert(plan_id, rows + rows)

    monkeypatch.setattr(installments, "_insert_payments", insert_twice)
    with pytest.raises(PersistenceError):
        await installments.reconcile(plan.id)
    monkeypatch.undo()

    payments = await installments.get_payments(plan.id)
    assert [p.month_index for p in payments] == [1, 2, 3, 4, 5, 6]
    assert [p.is_paid for p in payments] == [True, False, False, False, False, False]
    assert (await installments.get(plan.id)).paid_count == 1


async def test_null_fields_in_update_are_ignored(installments, plan):
    before = [p.id for p in await installments.get_payments(plan.id)]

    updated = await installments.update(plan.id, InstallmentUpdate(
        title="Laptop",
        due_day=None,
        installment_count=None,
        start_date=None,
        installment_amount=None,
    ))

    assert updated.title == "Laptop"
    assert updated.due_day == 31
    assert updated.installment_count == 6
    assert updated.total_amount == Decimal("15000000")
    assert [p.id for p in await installments.get_payments(plan.id)] == before


async def test_null_description_clears_it(installments, plan):
    await installments.update(plan.id, InstallmentUpdate(description="note"))
    updated = await installments.update(plan.id, InstallmentUpdate(description=None))
    assert updated.description is None


async def test_plan_lock_is_released_after_delete(installments, plan):
    await installments.toggle_payment(plan.id, 1, True)
    assert plan.id in installments.locks

    await installments.delete(plan.id)
    assert plan.id not in installments.locks

    await installments.reconcile(plan.id)
    assert plan.id not in installments.locks


async def test_non_utc_clock_is_stored_as_utc(session, adapter, plan):
    tehran_noon = datetime(2025, 11, 5, 12, 0, tzinfo=adapter.tz)
    repo = InstallmentRepository(session, adapter=adapter, clock=FixedClock(tehran_noon))

    await repo.toggle_payment(plan.id, 1, True)
    session.expire_all()

    payment = (await repo.get_payments(plan.id))[0]
    assert ensure_aware(payment.paid_at) == datetime(2025, 11, 5, 8, 30, tzinfo=timezone.utc)
