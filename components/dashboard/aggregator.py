"""Monthly aggregation of financial records for trend charts."""

from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, TypeVar

import pandas as pd

from components.jalali.adapter import Instant, JalaliDateAdapter, default_adapter

T = TypeVar("T")


class MonthlySeries(NamedTuple):
    """Month keys (``YYYY/MM``, oldest first) and the sum for each month."""
    labels: List[str]
    values: List[float]


def month_window(
    months_back: int,
    now: Optional[datetime] = None,
    adapter: Optional[JalaliDateAdapter] = None,
) -> List[str]:
    """Keys of the `months_back` Jalali months ending with the month of `now`."""
    if months_back < 0:
        raise ValueError(f"months_back must not be negative, got {months_back}")
    adapter = adapter or default_adapter()
    current = adapter.to_jalali(now or datetime.now(timezone.utc))
    keys = []
    for offset in range(months_back - 1, -1, -1):
        month = adapter.add_months(current, -offset, day=1)
        keys.append(f"{month.year:04d}/{month.month:02d}")
    return keys


def bucket_by_month(
    items: Iterable[T],
    date_selector: Callable[[T], Optional[Instant]],
    amount_selector: Callable[[T], Optional[float]],
    months_back: int = 6,
    now: Optional[datetime] = None,
    adapter: Optional[JalaliDateAdapter] = None,
) -> MonthlySeries:
    """
    Sum item amounts into the last `months_back` Jalali months.

    Labels depend only on `now` and `months_back`, so series built from
    different item sets line up position by position. Items dated outside
    the window are dropped, items without a date are skipped and a missing
    amount counts as zero.
    """
    adapter = adapter or default_adapter()
    labels = month_window(months_back, now=now, adapter=adapter)
    buckets: Dict[str, float] = {label: 0.0 for label in labels}

    for item in items:
        when = date_selector(item)
        if when is None:
            continue
        key = adapter.month_key(when)
        if key in buckets:
            buckets[key] += float(amount_selector(item) or 0)

    return MonthlySeries(labels, [buckets[label] for label in labels])


def overlay_series(labels: Sequence[str], series: Dict[str, Sequence[float]]) -> pd.DataFrame:
    """
    Combine aligned monthly series into one frame indexed by month key.

    Every series must have one value per label.
    """
    for name, values in series.items():
        if len(values) != len(labels):
            raise ValueError(f"Series {name!r} has {len(values)} values for {len(labels)} months")
    frame = pd.DataFrame({name: list(values) for name, values in series.items()}, index=list(labels))
    frame.index.name = "month"
    return frame
