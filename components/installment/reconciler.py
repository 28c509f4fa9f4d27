"""Schedule reconciliation planning.

When a plan's start date, installment count or due day changes, its
occurrences are regenerated from scratch. Paid history is carried over by
position: if P occurrences were paid before, the first min(P, count) new
occurrences are paid, reusing the old paid timestamps in order. Old due dates
are not matched against new ones, so after an edit the paid rows are simply
the earliest ones.
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import DefaultDict, List, Optional, Sequence

from components.installment.schedule import generate_schedule
from components.jalali.adapter import Instant, JalaliDateAdapter


@dataclass(frozen=True)
class OccurrenceDraft:
    """A payment occurrence ready to be inserted."""
    month_index: int
    due_date: datetime
    is_paid: bool
    paid_at: Optional[datetime]


def plan_occurrences(
    start_date: Instant,
    count: int,
    due_day: int,
    prior_paid_at: Sequence[Optional[datetime]],
    now: datetime,
    adapter: Optional[JalaliDateAdapter] = None,
) -> List[OccurrenceDraft]:
    """
    Lay out a fresh occurrence list for a plan.

    `prior_paid_at` holds the paid_at values of the previously paid
    occurrences ordered by month index; its length is the prior paid count.
    A missing timestamp is replaced with `now`.
    """
    schedule = generate_schedule(start_date, count, due_day, adapter=adapter)
    paid_count = min(len(prior_paid_at), len(schedule))

    drafts = []
    for position, due_date in enumerate(schedule):
        paid = position < paid_count
        drafts.append(OccurrenceDraft(
            month_index=position + 1,
            due_date=due_date,
            is_paid=paid,
            paid_at=(prior_paid_at[position] or now) if paid else None,
        ))
    return drafts


class PlanLocks:
    """Per-plan asyncio locks so two resyncs of one plan never interleave."""

    def __init__(self) -> None:
        self._locks: DefaultDict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    def __call__(self, plan_id: int) -> asyncio.Lock:
        return self._locks[plan_id]

    def __contains__(self, plan_id: int) -> bool:
        return plan_id in self._locks

    def discard(self, plan_id: int) -> None:
        """Forget the lock of a plan that no longer exists, unless someone is holding it."""
        lock = self._locks.get(plan_id)
        if lock is not None and not lock.locked():
            del self._locks[plan_id]


plan_locks = PlanLocks()
