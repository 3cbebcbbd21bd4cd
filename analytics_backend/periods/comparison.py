"""
Comparison baselines - derive the range a primary period is compared against

Modes:
- previous_period: same number of days, ending the day before the primary start
- previous_year: each endpoint shifted back 12 calendar months independently
- custom: a user-picked range, normalized to whole days

Dispatch note: the dashboard only special-cases previous_period. Wherever no
complete custom comparison range is being applied (preset selection, turning
comparison on), custom mode produces the previous-year baseline.
derive_comparison() implements that dispatch.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, Optional

import structlog

from analytics_backend.periods.ranges import TimeRange, start_of_day, end_of_day, shift_months, coerce_range

logger = structlog.get_logger(__name__)


class ComparisonMode(str, Enum):
    """How the comparison baseline is derived"""
    PREVIOUS_PERIOD = "previous_period"
    PREVIOUS_YEAR = "previous_year"
    CUSTOM = "custom"


PREVIOUS_PERIOD_LABEL = "Previous period"
PREVIOUS_YEAR_LABEL = "Same period last year"
CUSTOM_COMPARISON_LABEL = "Custom comparison"

# Mode picker labels
COMPARISON_LABELS: Dict[ComparisonMode, str] = {
    ComparisonMode.PREVIOUS_PERIOD: PREVIOUS_PERIOD_LABEL,
    ComparisonMode.PREVIOUS_YEAR: PREVIOUS_YEAR_LABEL,
    ComparisonMode.CUSTOM: "Custom",
}


@dataclass(frozen=True)
class ComparisonSelection:
    """Committed comparison state. range is None iff comparison is disabled."""
    enabled: bool
    mode: ComparisonMode
    range: Optional[TimeRange] = None
    label: str = ""

    def __post_init__(self):
        if self.enabled and self.range is None:
            raise ValueError("An enabled comparison requires a range")
        if not self.enabled and self.range is not None:
            raise ValueError("A disabled comparison cannot carry a range")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        result = {
            "enabled": self.enabled,
            "mode": self.mode.value,
            "label": self.label,
        }
        if self.range is not None:
            result["range"] = self.range.to_dict()
        return result


def previous_period(primary: TimeRange) -> TimeRange:
    """
    Baseline of identical length immediately before the primary range.

    The length is counted in whole days between the two endpoints, so
    [Mar 1, Mar 7] (6 whole days apart) yields [Feb 22, Feb 28].
    """
    days = (primary.end_date - primary.start_date).days
    return TimeRange(
        start=start_of_day(primary.start - timedelta(days=days + 1)),
        end=end_of_day(primary.start - timedelta(days=1))
    )


def previous_year(primary: TimeRange) -> TimeRange:
    """Both endpoints shifted back 12 calendar months (Feb 29 clamps to Feb 28)"""
    zone = primary.start.tzinfo
    return TimeRange(
        start=start_of_day(shift_months(primary.start_date, -12), zone),
        end=end_of_day(shift_months(primary.end_date, -12), zone)
    )


def resolve_comparison(
    primary: TimeRange,
    mode: ComparisonMode,
    custom_range: Optional[TimeRange] = None
) -> Optional[ComparisonSelection]:
    """
    Derive an enabled comparison selection for a primary range.

    Args:
        primary: Committed primary range
        mode: Comparison mode
        custom_range: User-picked baseline, used only in custom mode

    Returns:
        ComparisonSelection, or None in custom mode when no custom range has
        been supplied yet (the caller withholds the update)
    """
    mode = ComparisonMode(mode)

    if mode == ComparisonMode.PREVIOUS_PERIOD:
        baseline, label = previous_period(primary), PREVIOUS_PERIOD_LABEL
    elif mode == ComparisonMode.PREVIOUS_YEAR:
        baseline, label = previous_year(primary), PREVIOUS_YEAR_LABEL
    else:
        if custom_range is None:
            logger.debug("Custom comparison requested without a range, withholding update")
            return None
        baseline, label = coerce_range(custom_range), CUSTOM_COMPARISON_LABEL

    logger.debug(
        "Comparison resolved",
        mode=mode.value,
        start=baseline.start.isoformat(),
        end=baseline.end.isoformat()
    )
    return ComparisonSelection(enabled=True, mode=mode, range=baseline, label=label)


def derive_comparison(primary: TimeRange, mode: ComparisonMode) -> ComparisonSelection:
    """
    Derive a comparison the way the date range picker dispatches it.

    Only previous_period is special-cased; previous_year and custom both
    produce the previous-year baseline. The selection keeps the requested
    mode so the custom picker stays selected.
    """
    mode = ComparisonMode(mode)
    if mode == ComparisonMode.PREVIOUS_PERIOD:
        return resolve_comparison(primary, mode)

    baseline = previous_year(primary)
    if mode == ComparisonMode.CUSTOM:
        logger.info(
            "Custom comparison derived as same period last year",
            start=baseline.start.isoformat(),
            end=baseline.end.isoformat()
        )
    return ComparisonSelection(enabled=True, mode=mode, range=baseline, label=PREVIOUS_YEAR_LABEL)


def disabled_comparison(mode: ComparisonMode) -> ComparisonSelection:
    """Comparison switched off; the mode is remembered, the range is not"""
    return ComparisonSelection(enabled=False, mode=ComparisonMode(mode))


def comparison_options() -> Dict[str, str]:
    """Return mapping of comparison mode -> human label"""
    return {mode.value: label for mode, label in COMPARISON_LABELS.items()}
