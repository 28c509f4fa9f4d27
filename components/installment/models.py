"""Installment plan and payment occurrence models for the database."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from components.core.database import Base


class Installment(Base):
    """Installment plan: a fixed monthly amount paid `installment_count` times."""
    __tablename__ = "installments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    total_amount = Column(Numeric(18, 2), nullable=False)  # installment_amount * installment_count
    installment_count = Column(Integer, nullable=False)
    paid_count = Column(Integer, nullable=False, default=0)
    installment_amount = Column(Numeric(18, 2), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    due_day = Column(Integer, nullable=False)  # Jalali day of month
    description = Column(Text, nullable=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    payments = relationship(
        "InstallmentPayment",
        back_populates="installment",
        order_by="InstallmentPayment.month_index",
        passive_deletes=True,
    )


class InstallmentPayment(Base):
    """One scheduled monthly payment of an installment plan."""
    __tablename__ = "installment_payments"
    __table_args__ = (
        UniqueConstraint("installment_id", "month_index", name="uq_installment_month"),
        Index("idx_installment_payments_due_date", "due_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    installment_id = Column(Integer, ForeignKey("installments.id", ondelete="CASCADE"), nullable=False)
    month_index = Column(Integer, nullable=False)  # 1-based
    due_date = Column(DateTime(timezone=True), nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    installment = relationship("Installment", back_populates="payments")
