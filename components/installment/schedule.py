"""Monthly due-date generation on the Jalali calendar."""

from datetime import datetime
from typing import List, Optional

from components.core.exceptions import InvalidScheduleParamsError
from components.jalali.adapter import Instant, JalaliDateAdapter, default_adapter


def validate_schedule_params(count: int, due_day: int) -> None:
    """Reject installment counts below 1 and due days outside 1-31."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidScheduleParamsError(f"Installment count must be a positive integer, got {count!r}")
    if isinstance(due_day, bool) or not isinstance(due_day, int) or not 1 <= due_day <= 31:
        raise InvalidScheduleParamsError(f"Due day must be between 1 and 31, got {due_day!r}")


def generate_schedule(
    start_date: Instant,
    count: int,
    due_day: int,
    adapter: Optional[JalaliDateAdapter] = None,
) -> List[datetime]:
    """
    Build `count` monthly due dates starting in the Jalali month of `start_date`.

    Occurrence i falls in the month i months after the start month, on day
    min(due_day, days in that month). Every month is clamped from `due_day`
    itself, so a 30-day month between two 31-day months does not pull the
    following dates back. Due dates keep the local time of day of
    `start_date`.

    Raises:
        InvalidScheduleParamsError: count < 1 or due_day outside 1-31.
        InvalidDateError: start_date cannot be parsed.
    """
    validate_schedule_params(count, due_day)
    adapter = adapter or default_adapter()

    start_local = adapter.local(start_date)
    start = adapter.to_jalali(start_local)
    at = start_local.time()

    return [
        adapter.from_jalali(adapter.add_months(start, offset, day=due_day), at=at)
        for offset in range(count)
    ]
