"""Jalali (Persian) calendar adapter.

Wraps ``jdatetime`` so the rest of the code base only deals with
timezone-aware Gregorian instants and the small ``JalaliDate`` value type.
Calendar fields are always read in the configured local timezone, while
instants are returned in UTC for storage.

The adapter carries its own ``DateFormatConfig`` (timezone and digit mode)
instead of relying on process-wide locale state, so several adapters with
different settings can be used side by side.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jdatetime

from components.core.exceptions import InvalidDateError

Instant = Union[datetime, date, str]

PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"
_TO_ASCII = str.maketrans(PERSIAN_DIGITS + ARABIC_DIGITS, "0123456789" * 2)
_TO_PERSIAN = str.maketrans("0123456789", PERSIAN_DIGITS)

MONTH_NAMES_FA = (
    "فروردین", "اردیبهشت", "خرداد", "تیر", "مرداد", "شهریور",
    "مهر", "آبان", "آذر", "دی", "بهمن", "اسفند",
)


def to_ascii_digits(value: str) -> str:
    """Replace Persian and Arabic-Indic digits with ASCII digits."""
    return value.translate(_TO_ASCII)


def ensure_aware(instant: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def to_utc(instant: datetime) -> datetime:
    return ensure_aware(instant).astimezone(timezone.utc)


@dataclass(frozen=True)
class DateFormatConfig:
    """Explicit calendar configuration for a JalaliDateAdapter."""
    timezone: str = "Asia/Tehran"
    persian_digits: bool = False

    @property
    def tz(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise InvalidDateError(f"Unknown timezone: {self.timezone}") from exc


@dataclass(frozen=True, order=True)
class JalaliDate:
    """A day in the Persian calendar."""
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidDateError(f"Jalali month out of range: {self.month}")
        if not 1 <= self.day <= days_in_month(self.year, self.month):
            raise InvalidDateError(
                f"Jalali day out of range: {self.year}/{self.month}/{self.day}"
            )

    def to_jdatetime(self) -> jdatetime.date:
        return jdatetime.date(self.year, self.month, self.day)

    def to_gregorian(self) -> date:
        return self.to_jdatetime().togregorian()

    @classmethod
    def from_gregorian(cls, value: date) -> "JalaliDate":
        try:
            j = jdatetime.date.fromgregorian(date=value)
        except (ValueError, OverflowError) as exc:
            raise InvalidDateError(f"Cannot convert {value!r} to Jalali") from exc
        return cls(j.year, j.month, j.day)

    def __str__(self) -> str:
        return f"{self.year:04d}/{self.month:02d}/{self.day:02d}"


def days_in_month(year: int, month: int) -> int:
    """Length of a Jalali month: 31 for months 1-6, 30 for 7-11, 29/30 for 12."""
    if not 1 <= month <= 12:
        raise InvalidDateError(f"Jalali month out of range: {month}")
    if month <= 6:
        return 31
    if month <= 11:
        return 30
    try:
        leap = jdatetime.date(year, 12, 1).isleap()
    except ValueError as exc:
        raise InvalidDateError(f"Jalali year out of range: {year}") from exc
    return 30 if leap else 29


class JalaliDateAdapter:
    """Conversion and month arithmetic between instants and Jalali dates."""

    def __init__(self, config: Optional[DateFormatConfig] = None):
        self.config = config or DateFormatConfig()
        self.tz = self.config.tz

    # -- conversion -------------------------------------------------------

    def coerce_instant(self, instant: Instant) -> datetime:
        """Normalize a datetime, date or ISO string to an aware UTC datetime."""
        if isinstance(instant, str):
            try:
                instant = datetime.fromisoformat(instant.strip())
            except ValueError as exc:
                raise InvalidDateError(f"Malformed date string: {instant!r}") from exc
        if isinstance(instant, datetime):
            return ensure_aware(instant).astimezone(timezone.utc)
        if isinstance(instant, date):
            return datetime.combine(instant, time(0), tzinfo=self.tz).astimezone(timezone.utc)
        raise InvalidDateError(f"Unsupported date value: {instant!r}")

    def local(self, instant: Instant) -> datetime:
        """The instant expressed in the configured local timezone."""
        return self.coerce_instant(instant).astimezone(self.tz)

    def to_jalali(self, instant: Instant) -> JalaliDate:
        if isinstance(instant, date) and not isinstance(instant, datetime):
            return JalaliDate.from_gregorian(instant)
        return JalaliDate.from_gregorian(self.local(instant).date())

    def from_jalali(self, jdate: JalaliDate, at: Optional[time] = None) -> datetime:
        """Local midnight (or local time `at`) of `jdate`, as a UTC instant."""
        local = datetime.combine(jdate.to_gregorian(), at or time(0), tzinfo=self.tz)
        return local.astimezone(timezone.utc)

    def today(self, now: Optional[datetime] = None) -> JalaliDate:
        return self.to_jalali(now or datetime.now(timezone.utc))

    # -- calendar arithmetic ----------------------------------------------

    @staticmethod
    def days_in_month(year: int, month: int) -> int:
        return days_in_month(year, month)

    def add_months(self, jdate: JalaliDate, months: int, day: Optional[int] = None) -> JalaliDate:
        """
        Move `months` Jalali months from `jdate`.

        The day is `day` (defaults to `jdate.day`) clamped to the length of
        the target month. Pass the originally requested day on every step of
        a series so that a short month does not shift later months.
        """
        wanted = jdate.day if day is None else day
        total = jdate.month - 1 + months
        year = jdate.year + total // 12
        month = total % 12 + 1
        return JalaliDate(year, month, min(wanted, days_in_month(year, month)))

    def day_of_month(self, instant: Instant) -> int:
        return self.to_jalali(instant).day

    # -- formatting -------------------------------------------------------

    def digits(self, value: str) -> str:
        """Apply the configured digit mode to an ASCII string."""
        return value.translate(_TO_PERSIAN) if self.config.persian_digits else value

    def format_date(self, instant: Instant) -> str:
        return self.digits(str(self.to_jalali(instant)))

    def format_datetime(self, instant: Instant) -> str:
        local = self.local(instant)
        jdate = JalaliDate.from_gregorian(local.date())
        return self.digits(f"{jdate} {local:%H:%M}")

    def month_key(self, instant: Instant) -> str:
        jdate = self.to_jalali(instant)
        return f"{jdate.year:04d}/{jdate.month:02d}"

    def month_label(self, key: str) -> str:
        """Turn a ``YYYY/MM`` key into a label such as ``آبان ۱۴۰۴``."""
        year, month = self._split_key(key)
        return f"{MONTH_NAMES_FA[month - 1]} {self.digits(str(year))}"

    def parse_date(self, value: str) -> datetime:
        """Parse ``YYYY/MM/DD`` (any digit script) into a UTC instant."""
        parts = to_ascii_digits(value).strip().split("/")
        if len(parts) != 3:
            raise InvalidDateError(f"Invalid Persian date format: {value!r}")
        try:
            year, month, day = (int(part) for part in parts)
        except ValueError as exc:
            raise InvalidDateError(f"Invalid Persian date format: {value!r}") from exc
        return self.from_jalali(JalaliDate(year, month, day))

    @staticmethod
    def _split_key(key: str):
        try:
            year, month = (int(part) for part in to_ascii_digits(key).split("/"))
        except ValueError as exc:
            raise InvalidDateError(f"Invalid month key: {key!r}") from exc
        if not 1 <= month <= 12:
            raise InvalidDateError(f"Invalid month key: {key!r}")
        return year, month


@lru_cache()
def default_adapter() -> JalaliDateAdapter:
    """Adapter built from application settings."""
    from components.core.config import get_settings

    return JalaliDateAdapter(get_settings().date_format)
