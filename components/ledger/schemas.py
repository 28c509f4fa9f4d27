"""Pydantic schemas for debts, credits, checks and expenses."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

CheckType = Literal["receivable", "payable"]
CheckStatus = Literal["pending", "cashed", "bounced"]


class RecordRead(BaseModel):
    """Fields shared by every stored record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class DebtCreate(BaseModel):
    person_name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = None
    amount: Decimal = Field(..., ge=0)
    description: Optional[str] = None
    due_date: datetime
    is_paid: bool = False
    reminder_days: int = Field(3, ge=0)


class DebtUpdate(BaseModel):
    person_name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    is_paid: Optional[bool] = None
    reminder_days: Optional[int] = Field(None, ge=0)


class Debt(RecordRead, DebtCreate):
    pass


class CreditCreate(BaseModel):
    person_name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = None
    amount: Decimal = Field(..., ge=0)
    description: Optional[str] = None
    due_date: datetime
    is_received: bool = False
    reminder_days: int = Field(3, ge=0)


class CreditUpdate(BaseModel):
    person_name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    is_received: Optional[bool] = None
    reminder_days: Optional[int] = Field(None, ge=0)


class Credit(RecordRead, CreditCreate):
    pass


class CheckCreate(BaseModel):
    check_number: str = Field(..., min_length=1, max_length=64)
    amount: Decimal = Field(..., ge=0)
    bank_name: str = Field(..., min_length=1, max_length=100)
    due_date: datetime
    type: CheckType
    status: CheckStatus = "pending"
    person_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    reminder_days: int = Field(3, ge=0)


class CheckUpdate(BaseModel):
    check_number: Optional[str] = Field(None, min_length=1, max_length=64)
    amount: Optional[Decimal] = Field(None, ge=0)
    bank_name: Optional[str] = Field(None, min_length=1, max_length=100)
    due_date: Optional[datetime] = None
    type: Optional[CheckType] = None
    status: Optional[CheckStatus] = None
    person_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    reminder_days: Optional[int] = Field(None, ge=0)


class Check(RecordRead, CheckCreate):
    pass


class ExpenseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0)
    due_date: datetime
    description: Optional[str] = None
    reminder_days: int = Field(3, ge=0)


class ExpenseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    description: Optional[str] = None
    reminder_days: Optional[int] = Field(None, ge=0)


class Expense(RecordRead, ExpenseCreate):
    pass
