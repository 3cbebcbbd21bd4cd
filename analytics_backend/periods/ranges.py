"""
Time Range primitives - inclusive [start, end] ranges and day-boundary helpers

Boundaries derived from a calendar date are always start-of-day
(00:00:00.000) or end-of-day (23:59:59.999). Naive anchors produce naive
boundaries (viewer-local wall clock); zone-aware anchors keep their zone.
"""

from datetime import datetime, date, time
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass

from dateutil.relativedelta import relativedelta

DayLike = Union[date, datetime]

START_OF_DAY = time.min
# Millisecond precision, matching the ISO strings sent to the analytics API
END_OF_DAY = time(23, 59, 59, 999000)


def _calendar_date(value: DayLike, tz=None) -> date:
    """Calendar date of a date or datetime, read in ``tz`` when one is given"""
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def _zone_of(value: DayLike, tz=None):
    if tz is not None:
        return tz
    if isinstance(value, datetime):
        return value.tzinfo
    return None


def _combine(day: date, at: time, tz) -> datetime:
    """Attach a wall-clock time to a date, localizing pytz zones correctly"""
    if tz is None:
        return datetime.combine(day, at)
    if hasattr(tz, "localize"):
        return tz.localize(datetime.combine(day, at))
    return datetime.combine(day, at, tzinfo=tz)


def start_of_day(value: DayLike, tz=None) -> datetime:
    """00:00:00.000 on the calendar day of ``value``"""
    return _combine(_calendar_date(value, tz), START_OF_DAY, _zone_of(value, tz))


def end_of_day(value: DayLike, tz=None) -> datetime:
    """23:59:59.999 on the calendar day of ``value``"""
    return _combine(_calendar_date(value, tz), END_OF_DAY, _zone_of(value, tz))


def shift_months(day: date, months: int) -> date:
    """
    Shift a calendar date by whole months.

    Days that do not exist in the target month clamp to its last day,
    so 2028-02-29 shifted by -12 months is 2027-02-28.
    """
    return day + relativedelta(months=months)


@dataclass(frozen=True)
class TimeRange:
    """Inclusive [start, end] range of instants"""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(
                f"TimeRange start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @classmethod
    def from_dates(cls, start: DayLike, end: DayLike, tz=None) -> "TimeRange":
        """Build a day-aligned range covering both calendar days"""
        return cls(start=start_of_day(start, tz), end=end_of_day(end, tz))

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    @property
    def days(self) -> int:
        """Number of calendar days in the range, both endpoints included"""
        return (self.end_date - self.start_date).days + 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "start_datetime": isoformat_ms(self.start),
            "end_datetime": isoformat_ms(self.end),
            "days": self.days,
        }


def isoformat_ms(value: datetime) -> str:
    """ISO-8601 with millisecond precision, e.g. 2026-03-15T23:59:59.999"""
    return value.isoformat(timespec="milliseconds")


def coerce_range(value: Optional[TimeRange]) -> Optional[TimeRange]:
    """Re-align an arbitrary range to whole days, leaving None untouched"""
    if value is None:
        return None
    return TimeRange.from_dates(value.start, value.end)
