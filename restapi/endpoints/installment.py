"""Installment plan endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.installment import schemas
from components.installment.models import InstallmentPayment
from components.installment.repository import InstallmentRepository
from components.installment.schedule import generate_schedule
from components.jalali.adapter import default_adapter

router = APIRouter(
    prefix="/installments",
    tags=["installments"],
    responses={404: {"description": "Not found"}},
)


def _payment(payment: InstallmentPayment) -> schemas.InstallmentPayment:
    adapter = default_adapter()
    result = schemas.InstallmentPayment.model_validate(payment)
    result.jalali_due_date = adapter.format_date(payment.due_date)
    if payment.paid_at is not None:
        result.jalali_paid_at = adapter.format_datetime(payment.paid_at)
    return result


def _schedule(due_day: int, due_dates) -> schemas.Schedule:
    adapter = default_adapter()
    return schemas.Schedule(
        due_day=due_day,
        entries=[
            schemas.ScheduleEntry(
                month_index=index,
                due_date=due_date,
                jalali_due_date=adapter.format_date(due_date),
            )
            for index, due_date in enumerate(due_dates, start=1)
        ],
    )


@router.get("/", response_model=List[schemas.Installment])
async def list_installments(db: AsyncSession = Depends(get_db)):
    """Get all installment plans, newest first."""
    return await InstallmentRepository(db).list()


@router.post("/", response_model=schemas.Installment, status_code=status.HTTP_201_CREATED)
async def create_installment(
    installment: schemas.InstallmentCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an installment plan and its monthly payment schedule.

    If due_day is omitted, the Jalali day of start_date is used. Days past
    the end of a short month fall on that month's last day.
    """
    return await InstallmentRepository(db).create(installment)


@router.post("/schedule-preview", response_model=schemas.Schedule)
async def preview_schedule(request: schemas.SchedulePreviewRequest):
    """Preview the due dates a plan would get, without saving anything."""
    adapter = default_adapter()
    due_day = request.due_day if request.due_day is not None else adapter.day_of_month(request.start_date)
    due_dates = generate_schedule(request.start_date, request.installment_count, due_day, adapter=adapter)
    return _schedule(due_day, due_dates)


@router.get("/{installment_id}", response_model=schemas.Installment)
async def read_installment(installment_id: int, db: AsyncSession = Depends(get_db)):
    """Get a specific installment plan by ID."""
    return await InstallmentRepository(db).get_or_raise(installment_id)


@router.patch("/{installment_id}", response_model=schemas.Installment)
async def update_installment(
    installment_id: int,
    patch: schemas.InstallmentUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Update an installment plan.

    Changing start_date, installment_count or due_day regenerates the
    schedule; the number of paid payments is kept, counted from the first.
    """
    return await InstallmentRepository(db).update(installment_id, patch)


@router.delete("/{installment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_installment(installment_id: int, db: AsyncSession = Depends(get_db)):
    """Delete an installment plan and all of its payments."""
    await InstallmentRepository(db).delete(installment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{installment_id}/payments", response_model=List[schemas.InstallmentPayment])
async def list_payments(installment_id: int, db: AsyncSession = Depends(get_db)):
    """Get the payments of a plan ordered by month."""
    payments = await InstallmentRepository(db).get_payments(installment_id)
    return [_payment(payment) for payment in payments]


@router.put("/{installment_id}/payments/{month_index}", response_model=schemas.InstallmentPayment)
async def toggle_payment(
    installment_id: int,
    month_index: int,
    toggle: schemas.PaymentToggle,
    db: AsyncSession = Depends(get_db)
):
    """Mark one monthly payment as paid or unpaid."""
    payment = await InstallmentRepository(db).toggle_payment(installment_id, month_index, toggle.paid)
    return _payment(payment)


@router.post("/{installment_id}/resync", status_code=status.HTTP_204_NO_CONTENT)
async def sync_schedule(installment_id: int, db: AsyncSession = Depends(get_db)):
    """Regenerate a plan's payments from its current parameters. Unknown IDs are ignored."""
    await InstallmentRepository(db).reconcile(installment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{installment_id}/schedule", response_model=schemas.Schedule)
async def read_schedule(installment_id: int, db: AsyncSession = Depends(get_db)):
    """Due dates generated from the stored plan parameters."""
    repo = InstallmentRepository(db)
    plan = await repo.get_or_raise(installment_id)
    return _schedule(plan.due_day, await repo.schedule_for(installment_id))
