"""
Period presets - map a named dashboard period onto a concrete time range

Every preset is resolved against an explicit anchor instant ("now"):

    today           startOfDay(now)                 .. endOfDay(now)
    yesterday       startOfDay(now - 1d)            .. endOfDay(now - 1d)
    last_7_days     startOfDay(now - 6d)            .. endOfDay(now)
    last_28_days    startOfDay(now - 27d)           .. endOfDay(now)
    last_30_days    startOfDay(now - 29d)           .. endOfDay(now)
    last_90_days    startOfDay(now - 89d)           .. endOfDay(now)
    last_12_months  startOfDay(now - 12 months)     .. endOfDay(now)
    this_week       Monday of now's week            .. endOfDay(now)
    this_month      first day of now's month        .. endOfDay(now)
    last_month      first day of previous month     .. endOfDay(last day of previous month)

Unknown identifiers resolve as last_30_days so the dashboard always has a
renderable range.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Union

import structlog

from analytics_backend.periods.ranges import TimeRange, start_of_day, end_of_day, shift_months
from analytics_backend.utils.errors import ErrorCode

logger = structlog.get_logger(__name__)


class PresetId(str, Enum):
    """Named dashboard periods"""
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "last_7_days"
    LAST_28_DAYS = "last_28_days"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    LAST_12_MONTHS = "last_12_months"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"

    @classmethod
    def parse(cls, value: Union[str, "PresetId", None]) -> "PresetId":
        """
        Map an identifier onto a preset.

        Unknown or empty identifiers fall back to FALLBACK_PRESET instead of
        raising, so a stale bookmark or query string still renders.
        """
        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            logger.warning(
                "Unknown period preset, using fallback",
                code=ErrorCode.UNKNOWN_PRESET.value,
                preset=value,
                fallback=FALLBACK_PRESET.value
            )
            return FALLBACK_PRESET


FALLBACK_PRESET = PresetId.LAST_30_DAYS

# Display order matches the preset list in the date range picker
PRESET_LABELS: Dict[PresetId, str] = {
    PresetId.TODAY: "Today",
    PresetId.YESTERDAY: "Yesterday",
    PresetId.LAST_7_DAYS: "Last 7 days",
    PresetId.LAST_28_DAYS: "Last 28 days",
    PresetId.LAST_30_DAYS: "Last 30 days",
    PresetId.LAST_90_DAYS: "Last 90 days",
    PresetId.LAST_12_MONTHS: "Last 12 months",
    PresetId.THIS_WEEK: "This week",
    PresetId.THIS_MONTH: "This month",
    PresetId.LAST_MONTH: "Last month",
}


def _trailing_days(n: int) -> Callable[[datetime], TimeRange]:
    """Rolling window of n calendar days ending today"""
    def resolve(now: datetime) -> TimeRange:
        return TimeRange(start=start_of_day(now - timedelta(days=n - 1)), end=end_of_day(now))
    return resolve


def _today(now: datetime) -> TimeRange:
    return TimeRange(start=start_of_day(now), end=end_of_day(now))


def _yesterday(now: datetime) -> TimeRange:
    yesterday = now - timedelta(days=1)
    return TimeRange(start=start_of_day(yesterday), end=end_of_day(yesterday))


def _last_12_months(now: datetime) -> TimeRange:
    start = shift_months(now.date(), -12)
    return TimeRange(start=start_of_day(start, now.tzinfo), end=end_of_day(now))


def _this_week(now: datetime) -> TimeRange:
    monday = now.date() - timedelta(days=now.weekday())
    return TimeRange(start=start_of_day(monday, now.tzinfo), end=end_of_day(now))


def _this_month(now: datetime) -> TimeRange:
    first = now.date().replace(day=1)
    return TimeRange(start=start_of_day(first, now.tzinfo), end=end_of_day(now))


def _last_month(now: datetime) -> TimeRange:
    first_this_month = now.date().replace(day=1)
    last_prev = first_this_month - timedelta(days=1)
    first_prev = last_prev.replace(day=1)
    return TimeRange(
        start=start_of_day(first_prev, now.tzinfo),
        end=end_of_day(last_prev, now.tzinfo)
    )


PRESET_RESOLVERS: Dict[PresetId, Callable[[datetime], TimeRange]] = {
    PresetId.TODAY: _today,
    PresetId.YESTERDAY: _yesterday,
    PresetId.LAST_7_DAYS: _trailing_days(7),
    PresetId.LAST_28_DAYS: _trailing_days(28),
    PresetId.LAST_30_DAYS: _trailing_days(30),
    PresetId.LAST_90_DAYS: _trailing_days(90),
    PresetId.LAST_12_MONTHS: _last_12_months,
    PresetId.THIS_WEEK: _this_week,
    PresetId.THIS_MONTH: _this_month,
    PresetId.LAST_MONTH: _last_month,
}


def resolve_preset(preset: Union[str, PresetId], now: datetime, tz=None) -> TimeRange:
    """
    Resolve a preset identifier into a concrete inclusive range.

    Args:
        preset: Preset identifier (unknown values resolve as last_30_days)
        now: Anchor instant; naive values are read as local wall-clock time
        tz: Optional zone to read an aware anchor in before resolving

    Returns:
        TimeRange with day-aligned boundaries
    """
    preset_id = PresetId.parse(preset)
    if tz is not None:
        now = now.astimezone(tz) if now.tzinfo is not None else _localize(now, tz)

    time_range = PRESET_RESOLVERS[preset_id](now)
    logger.debug(
        "Preset resolved",
        preset=preset_id.value,
        start=time_range.start.isoformat(),
        end=time_range.end.isoformat()
    )
    return time_range


def _localize(now: datetime, tz) -> datetime:
    if hasattr(tz, "localize"):
        return tz.localize(now)
    return now.replace(tzinfo=tz)


def preset_options() -> Dict[str, str]:
    """Return mapping of preset id -> human label, in display order"""
    return {preset.value: label for preset, label in PRESET_LABELS.items()}
