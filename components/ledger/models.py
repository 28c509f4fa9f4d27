"""Debt, credit, check and expense models for the database."""

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from components.core.database import Base


class Debt(Base):
    """Money the user owes to a person."""
    __tablename__ = "debts"

    id = Column(Integer, primary_key=True, index=True)
    person_name = Column(String(200), nullable=False)
    phone = Column(String(32), nullable=True)
    amount = Column(Numeric(18, 2), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    is_paid = Column(Boolean, nullable=False, default=False, index=True)
    reminder_days = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class Credit(Base):
    """Money a person owes to the user."""
    __tablename__ = "credits"

    id = Column(Integer, primary_key=True, index=True)
    person_name = Column(String(200), nullable=False)
    phone = Column(String(32), nullable=True)
    amount = Column(Numeric(18, 2), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    is_received = Column(Boolean, nullable=False, default=False, index=True)
    reminder_days = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class Check(Base):
    """Receivable or payable bank check."""
    __tablename__ = "checks"

    id = Column(Integer, primary_key=True, index=True)
    check_number = Column(String(64), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    bank_name = Column(String(100), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    type = Column(String(16), nullable=False, index=True)  # receivable / payable
    status = Column(String(16), nullable=False, default="pending", index=True)  # pending / cashed / bounced
    person_name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    reminder_days = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class Expense(Base):
    """One-off expense due on a date."""
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(Text, nullable=True)
    reminder_days = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
