"""
Custom range normalization - turn two picked calendar dates into a day-aligned range
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog

from analytics_backend.periods.ranges import DayLike, TimeRange, start_of_day, end_of_day
from analytics_backend.utils.errors import ErrorCode, create_error_response, friendly_message

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NormalizedRange:
    """Outcome of normalizing a custom date pair: either a range or an error code"""
    range: Optional[TimeRange] = None
    error: Optional[ErrorCode] = None

    @property
    def ok(self) -> bool:
        return self.range is not None

    @property
    def message(self) -> Optional[str]:
        return friendly_message(self.error)

    def to_error_response(self) -> Optional[Dict[str, Any]]:
        if self.error is None:
            return None
        return create_error_response(self.error)


def normalize_custom_range(
    start_date: Optional[DayLike],
    end_date: Optional[DayLike],
    tz=None
) -> NormalizedRange:
    """
    Normalize a user-picked date pair.

    Both dates are required and must be in order; out-of-order input is
    rejected rather than swapped. Future dates are accepted as-is, the
    calendar widget is responsible for disabling them.

    Args:
        start_date: First picked day (date or datetime)
        end_date: Last picked day (date or datetime)
        tz: Optional zone to localize the boundaries in

    Returns:
        NormalizedRange holding [startOfDay(start), endOfDay(end)] or an ErrorCode
    """
    if start_date is None:
        return NormalizedRange(error=ErrorCode.MISSING_START_DATE)
    if end_date is None:
        return NormalizedRange(error=ErrorCode.MISSING_END_DATE)

    start = start_of_day(start_date, tz)
    end = end_of_day(end_date, tz)
    if start.date() > end.date():
        logger.info(
            "Custom range rejected, start after end",
            start=start.date().isoformat(),
            end=end.date().isoformat()
        )
        return NormalizedRange(error=ErrorCode.RANGE_OUT_OF_ORDER)

    return NormalizedRange(range=TimeRange(start=start, end=end))
