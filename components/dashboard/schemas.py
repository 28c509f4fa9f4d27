"""Pydantic schemas for dashboard data."""

from typing import Dict, List
from pydantic import BaseModel


class FinancialSummary(BaseModel):
    """Schema for the dashboard totals."""
    total_debts: float
    total_credits: float
    pending_checks: int
    monthly_installments_total: float
    net_balance: float
    current_month: str


class MonthlyTrends(BaseModel):
    """Schema for aligned monthly series."""
    labels: List[str]
    month_names: List[str]
    series: Dict[str, List[float]]
