"""Account model for the database."""

from sqlalchemy import Column, DateTime, Integer, Numeric, String

from components.core.database import Base


class Account(Base):
    """Bank account or card; balances from pasted SMS are matched on card_last4."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    bank_name = Column(String(100), nullable=True)
    card_last4 = Column(String(4), unique=True, index=True, nullable=True)
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
