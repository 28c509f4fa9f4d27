"""Domain exceptions shared by all components."""

from typing import Optional


class FinanceTrackerError(Exception):
    """Base class for all errors raised by the tracker."""


class InvalidDateError(FinanceTrackerError, ValueError):
    """Malformed calendar input (instant, ISO string or Jalali fields)."""


class InvalidScheduleParamsError(FinanceTrackerError, ValueError):
    """Installment count below 1 or due day outside 1-31."""


class PlanNotFoundError(FinanceTrackerError, LookupError):
    """Installment plan does not exist."""

    def __init__(self, plan_id: int):
        super().__init__(f"Installment plan {plan_id} not found")
        self.plan_id = plan_id


class PaymentNotFoundError(FinanceTrackerError, LookupError):
    """No occurrence exists for the given plan and month index."""

    def __init__(self, plan_id: int, month_index: int):
        super().__init__(f"Installment plan {plan_id} has no payment #{month_index}")
        self.plan_id = plan_id
        self.month_index = month_index


class RecordNotFoundError(FinanceTrackerError, LookupError):
    """Account or ledger record does not exist."""

    def __init__(self, kind: str, record_id: Optional[int] = None):
        message = f"{kind} not found" if record_id is None else f"{kind} {record_id} not found"
        super().__init__(message)
        self.kind = kind
        self.record_id = record_id


class BackupFormatError(FinanceTrackerError, ValueError):
    """Backup document cannot be restored."""


class PersistenceError(FinanceTrackerError):
    """A storage transaction failed and was rolled back."""
