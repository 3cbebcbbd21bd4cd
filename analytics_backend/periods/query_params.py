"""
Query parameters and display labels for committed selections

Report pages hand these parameters to the analytics fetch layer:
- preset selection  -> period=<preset id>
- custom selection  -> from=<ISO>&to=<ISO>
- comparison        -> from=<ISO>&to=<ISO> (separate request), absent when disabled
"""

from datetime import date, datetime
from typing import Dict, Mapping, Optional
from urllib.parse import urlencode

import structlog

from analytics_backend.periods.comparison import ComparisonSelection
from analytics_backend.periods.presets import FALLBACK_PRESET, PRESET_LABELS, resolve_preset
from analytics_backend.periods.ranges import TimeRange, end_of_day, isoformat_ms, start_of_day
from analytics_backend.periods.selection import PeriodSelection

logger = structlog.get_logger(__name__)


def range_query_params(time_range: TimeRange) -> Dict[str, str]:
    return {"from": isoformat_ms(time_range.start), "to": isoformat_ms(time_range.end)}


def period_query_params(selection: PeriodSelection) -> Dict[str, str]:
    """Parameters describing the primary period"""
    if selection.is_custom:
        return range_query_params(selection.range)
    return {"period": selection.preset.value}


def comparison_query_params(comparison: ComparisonSelection) -> Optional[Dict[str, str]]:
    """Parameters describing the comparison baseline, or None when comparison is off"""
    if not comparison.enabled:
        return None
    return range_query_params(comparison.range)


def build_query_string(params: Optional[Mapping[str, str]]) -> Optional[str]:
    if params is None:
        return None
    return urlencode(params)


def _parse_boundary(value: str, align, tz=None) -> datetime:
    """
    Parse one from/to value.

    A bare calendar date is aligned with ``align`` (start_of_day or
    end_of_day). A trailing "Z" is read as UTC.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    # YYYY-MM-DD carries no time of day
    if len(text) == 10:
        return align(parsed.date(), tz)
    return parsed


def parse_period_query(params: Mapping[str, str], now: datetime, tz=None) -> TimeRange:
    """
    Read a range back from query parameters.

    An explicit from/to pair wins. An incomplete or unparseable pair falls
    back to the period identifier, which itself defaults to last_30_days.

    Args:
        params: Query parameters (from, to, period)
        now: Anchor instant for preset periods
        tz: Optional zone for preset resolution and bare dates

    Returns:
        TimeRange for the request
    """
    raw_from = params.get("from")
    raw_to = params.get("to")
    if raw_from and raw_to:
        try:
            return TimeRange(
                start=_parse_boundary(raw_from, start_of_day, tz),
                end=_parse_boundary(raw_to, end_of_day, tz)
            )
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring malformed from/to parameters", error=str(e))

    return resolve_preset(params.get("period") or FALLBACK_PRESET.value, now, tz)


def format_day(day: date) -> str:
    """e.g. Mar 1, 2026"""
    return f"{day:%b} {day.day}, {day.year}"


def format_range_label(time_range: TimeRange) -> str:
    """e.g. Mar 1, 2026 - Mar 7, 2026"""
    return f"{format_day(time_range.start_date)} - {format_day(time_range.end_date)}"


def active_label(selection: PeriodSelection) -> str:
    """Text for the date range button: the preset label or the custom dates"""
    if selection.is_custom:
        return format_range_label(selection.range)
    return PRESET_LABELS[selection.preset]


def comparison_badge(comparison: ComparisonSelection) -> Optional[str]:
    if not comparison.enabled:
        return None
    return f"vs {comparison.label}"


def comparison_summary(comparison: ComparisonSelection) -> Optional[str]:
    if not comparison.enabled:
        return None
    return f"Comparing to: {format_range_label(comparison.range)}"
