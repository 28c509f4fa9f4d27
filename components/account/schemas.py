"""Pydantic schemas for accounts and SMS balance updates."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

CARD_LAST4 = r"^\d{4}$"


class AccountBase(BaseModel):
    """Base account schema."""
    title: str = Field(..., min_length=1, max_length=200)
    bank_name: Optional[str] = None
    card_last4: Optional[str] = Field(None, pattern=CARD_LAST4)
    balance: Decimal = Decimal("0")


class AccountCreate(AccountBase):
    """Schema for account creation."""
    pass


class AccountUpdate(BaseModel):
    """Schema for a partial account update."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    bank_name: Optional[str] = None
    card_last4: Optional[str] = Field(None, pattern=CARD_LAST4)
    balance: Optional[Decimal] = None


class Account(AccountBase):
    """Schema for account response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class BalanceUpdate(BaseModel):
    """Schema for setting a balance by card suffix."""
    balance: Decimal


class ParsedBalance(BaseModel):
    """One card balance extracted from SMS text."""
    card_last4: str
    balance: int


class SmsText(BaseModel):
    """Raw pasted SMS text."""
    text: str


class SmsParseResult(BaseModel):
    """Schema for parsed SMS balances."""
    balances: List[ParsedBalance]


class SmsApplyResult(BaseModel):
    """Schema for balances applied to accounts."""
    balances: List[ParsedBalance]
    accounts: List[Account]
