"""Pydantic schemas for installment plans and their payments."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from components.jalali.adapter import default_adapter


def jalali_or_iso(value):
    """Accept a Jalali ``YYYY/MM/DD`` string (any digit script) next to ISO datetimes."""
    if isinstance(value, str) and "/" in value:
        return default_adapter().parse_date(value)
    return value


class InstallmentBase(BaseModel):
    """Base installment schema."""
    title: str = Field(..., min_length=1, max_length=200)
    installment_amount: Decimal = Field(..., ge=0)
    installment_count: int
    start_date: datetime
    description: Optional[str] = None

    parse_start_date = field_validator("start_date", mode="before")(jalali_or_iso)


class InstallmentCreate(InstallmentBase):
    """Schema for installment creation; due_day defaults to the start date's Jalali day."""
    due_day: Optional[int] = None


class InstallmentUpdate(BaseModel):
    """Partial update. Changing start_date, installment_count or due_day resyncs the schedule."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    installment_amount: Optional[Decimal] = Field(None, ge=0)
    installment_count: Optional[int] = None
    start_date: Optional[datetime] = None
    due_day: Optional[int] = None
    description: Optional[str] = None

    parse_start_date = field_validator("start_date", mode="before")(jalali_or_iso)


class Installment(InstallmentBase):
    """Schema for installment response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    due_day: int
    total_amount: Decimal
    paid_count: int
    is_paid: bool
    created_at: datetime
    updated_at: datetime


class InstallmentPayment(BaseModel):
    """Schema for one payment occurrence."""
    model_config = ConfigDict(from_attributes=True)

    installment_id: int
    month_index: int
    due_date: datetime
    is_paid: bool
    paid_at: Optional[datetime] = None
    jalali_due_date: Optional[str] = None
    jalali_paid_at: Optional[str] = None


class PaymentToggle(BaseModel):
    """Schema for marking a payment paid or unpaid."""
    paid: bool


class SchedulePreviewRequest(BaseModel):
    """Schema for a stateless schedule preview."""
    start_date: datetime
    installment_count: int
    due_day: Optional[int] = None

    parse_start_date = field_validator("start_date", mode="before")(jalali_or_iso)


class ScheduleEntry(BaseModel):
    """Schema for one due date in a schedule."""
    month_index: int
    due_date: datetime
    jalali_due_date: str


class Schedule(BaseModel):
    """Schema for a generated schedule."""
    due_day: int
    entries: List[ScheduleEntry]
