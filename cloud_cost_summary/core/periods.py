"""
Billing period calculation.

Derives the month-to-date, comparison, last-month and forecast windows
from a single "now" timestamp. All boundaries are UTC.

Comparison end clamping:
The prior-month comparison window spans the same number of whole days as
the month-to-date window. When that would run past the end of the previous
month (e.g. the 31st of March compared against February), the end is
clamped to the first day of the current month. Windows are half-open, so
that end still includes the last calendar day of the previous month and
never rolls over into the current one.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone


@dataclass(frozen=True)
class TimeWindow:
    """Half-open [start, end) interval in UTC."""
    start: datetime
    end: datetime

    def __post_init__(self):
        """Validate window ordering."""
        if self.start > self.end:
            raise ValueError("window start must not be after window end")

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    @property
    def last_day(self) -> date:
        """Last calendar day covered; the end date itself is exclusive."""
        return self.end_date - timedelta(days=1)

    @property
    def is_empty(self) -> bool:
        """True when the window covers no whole calendar day."""
        return self.start_date == self.end_date

    @property
    def start_epoch(self) -> int:
        return int(self.start.timestamp())

    @property
    def end_epoch(self) -> int:
        return int(self.end.timestamp())


@dataclass(frozen=True)
class BillingPeriods:
    """Period boundaries computed for one run."""
    now: datetime
    current_month_start: datetime
    last_month_start: datetime
    days_elapsed: int
    last_month_comparison_end: datetime
    current_month_end: datetime

    @property
    def month_to_date(self) -> TimeWindow:
        return TimeWindow(self.current_month_start, self.now)

    @property
    def last_month_comparison(self) -> TimeWindow:
        return TimeWindow(self.last_month_start, self.last_month_comparison_end)

    @property
    def last_month(self) -> TimeWindow:
        return TimeWindow(self.last_month_start, self.current_month_start)

    @property
    def forecast(self) -> TimeWindow:
        return TimeWindow(self.now, self.current_month_end)


def _ensure_utc(now: datetime) -> datetime:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def _add_months(month_start: datetime, months: int) -> datetime:
    """Shift a first-of-month timestamp by a whole number of months."""
    index = month_start.month - 1 + months
    year = month_start.year + index // 12
    month = index % 12 + 1
    return month_start.replace(year=year, month=month, day=1)


def compute_billing_periods(now: datetime) -> BillingPeriods:
    """Compute every period boundary needed for a cost summary.

    Args:
        now: Current timestamp; naive values are interpreted as UTC

    Returns:
        BillingPeriods with all boundaries in UTC
    """
    now = _ensure_utc(now)
    current_month_start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
    last_month_start = _add_months(current_month_start, -1)
    current_month_end = _add_months(current_month_start, 1)

    # Whole 24-hour periods, truncated toward the month start
    elapsed_hours = (now - current_month_start).total_seconds() / 3600
    days_elapsed = int(elapsed_hours // 24)

    comparison_end = last_month_start + timedelta(days=days_elapsed)
    comparison_end = min(comparison_end, current_month_start)

    return BillingPeriods(
        now=now,
        current_month_start=current_month_start,
        last_month_start=last_month_start,
        days_elapsed=days_elapsed,
        last_month_comparison_end=comparison_end,
        current_month_end=current_month_end,
    )
