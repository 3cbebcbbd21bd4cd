"""
Tests for comparison baseline derivation.

Tests cover:
- previous_period and previous_year ranges
- Leap day clamping
- Custom comparison ranges
- The custom/previous-year dispatch in derive_comparison
- ComparisonSelection invariants
"""

import pytest
from datetime import datetime, date, timedelta

from analytics_backend.periods.comparison import (
    ComparisonMode,
    ComparisonSelection,
    resolve_comparison,
    derive_comparison,
    disabled_comparison,
    previous_period,
    previous_year,
    comparison_options,
    COMPARISON_LABELS,
    PREVIOUS_PERIOD_LABEL,
    PREVIOUS_YEAR_LABEL,
)
from analytics_backend.periods.ranges import TimeRange


@pytest.fixture
def primary():
    """First week of March 2026"""
    return TimeRange.from_dates(date(2026, 3, 1), date(2026, 3, 7))


class TestPreviousPeriod:
    """Test the previous_period baseline"""

    def test_adjacent_week(self, primary):
        """[Mar 1, Mar 7] compares against [Feb 22, Feb 28]"""
        result = resolve_comparison(primary, ComparisonMode.PREVIOUS_PERIOD)

        assert result.enabled is True
        assert result.range == TimeRange.from_dates(date(2026, 2, 22), date(2026, 2, 28))
        assert result.label == "Previous period"
        assert result.mode == ComparisonMode.PREVIOUS_PERIOD

    @pytest.mark.parametrize("start,end", [
        (date(2026, 3, 15), date(2026, 3, 15)),
        (date(2026, 3, 1), date(2026, 3, 31)),
        (date(2026, 1, 1), date(2026, 3, 31)),
        (date(2025, 3, 15), date(2026, 3, 15)),
        (date(2028, 2, 1), date(2028, 2, 29)),
    ])
    def test_same_length_and_ends_day_before(self, start, end):
        base = TimeRange.from_dates(start, end)

        result = previous_period(base)

        assert result.days == base.days
        assert result.end_date == base.start_date - timedelta(days=1)

    def test_single_day_compares_to_previous_day(self):
        today = TimeRange.from_dates(date(2026, 3, 15), date(2026, 3, 15))

        result = previous_period(today)

        assert result == TimeRange.from_dates(date(2026, 3, 14), date(2026, 3, 14))

    def test_crosses_year_boundary(self):
        base = TimeRange.from_dates(date(2026, 1, 1), date(2026, 1, 31))

        result = previous_period(base)

        assert result.start_date == date(2025, 12, 1)
        assert result.end_date == date(2025, 12, 31)

    def test_keeps_zone_across_dst(self, berlin):
        base = TimeRange.from_dates(date(2026, 3, 30), date(2026, 4, 5), tz=berlin)

        result = previous_period(base)

        assert result.start == berlin.localize(datetime(2026, 3, 23))
        assert result.end == berlin.localize(datetime(2026, 3, 29, 23, 59, 59, 999000))


class TestPreviousYear:
    """Test the previous_year baseline"""

    def test_shifts_twelve_calendar_months(self, primary):
        """[Mar 1, Mar 7] 2026 compares against [Mar 1, Mar 7] 2025"""
        result = resolve_comparison(primary, ComparisonMode.PREVIOUS_YEAR)

        assert result.range.start == datetime(2025, 3, 1, 0, 0, 0)
        assert result.range.end == datetime(2025, 3, 7, 23, 59, 59, 999000)
        assert result.label == "Same period last year"

    def test_leap_day_start_clamps_to_feb_28(self):
        """Feb 29 has no counterpart in 2027 and rounds down"""
        base = TimeRange.from_dates(date(2028, 2, 29), date(2028, 3, 6))

        result = previous_year(base)

        assert result.start_date == date(2027, 2, 28)
        assert result.end_date == date(2027, 3, 6)

    def test_leap_day_end_clamps_to_feb_28(self):
        base = TimeRange.from_dates(date(2028, 2, 1), date(2028, 2, 29))

        result = previous_year(base)

        assert result.start_date == date(2027, 2, 1)
        assert result.end_date == date(2027, 2, 28)

    def test_endpoints_shift_independently(self):
        """Not a fixed day count: a 2028 range spanning Feb 29 loses a day"""
        base = TimeRange.from_dates(date(2028, 2, 20), date(2028, 3, 10))

        result = previous_year(base)

        assert result.start_date == date(2027, 2, 20)
        assert result.end_date == date(2027, 3, 10)
        assert result.days == base.days - 1


class TestCustomComparison:
    """Test custom comparison ranges"""

    def test_custom_range_is_normalized(self, primary):
        custom = TimeRange(start=datetime(2026, 1, 1, 12, 0), end=datetime(2026, 1, 7, 8, 0))

        result = resolve_comparison(primary, ComparisonMode.CUSTOM, custom)

        assert result.range == TimeRange.from_dates(date(2026, 1, 1), date(2026, 1, 7))
        assert result.label == "Custom comparison"
        assert result.mode == ComparisonMode.CUSTOM

    def test_custom_without_range_is_withheld(self, primary):
        """The resolver never fabricates a custom baseline"""
        assert resolve_comparison(primary, ComparisonMode.CUSTOM) is None

    def test_mode_accepts_string(self, primary):
        result = resolve_comparison(primary, "previous_year")

        assert result.mode == ComparisonMode.PREVIOUS_YEAR


class TestDeriveComparison:
    """Test the date range picker dispatch"""

    def test_previous_period_matches_resolver(self, primary):
        assert derive_comparison(primary, ComparisonMode.PREVIOUS_PERIOD) == \
            resolve_comparison(primary, ComparisonMode.PREVIOUS_PERIOD)

    def test_previous_year_matches_resolver(self, primary):
        assert derive_comparison(primary, ComparisonMode.PREVIOUS_YEAR) == \
            resolve_comparison(primary, ComparisonMode.PREVIOUS_YEAR)

    def test_custom_falls_through_to_previous_year(self, primary):
        """Custom mode without an applied custom range yields last year's period"""
        result = derive_comparison(primary, ComparisonMode.CUSTOM)

        assert result.range == previous_year(primary)
        assert result.label == "Same period last year"
        assert result.mode == ComparisonMode.CUSTOM


class TestComparisonSelection:
    """Test ComparisonSelection invariants"""

    def test_enabled_requires_range(self):
        with pytest.raises(ValueError):
            ComparisonSelection(enabled=True, mode=ComparisonMode.PREVIOUS_PERIOD)

    def test_disabled_cannot_carry_range(self, primary):
        with pytest.raises(ValueError):
            ComparisonSelection(enabled=False, mode=ComparisonMode.PREVIOUS_PERIOD, range=primary)

    def test_disabled_comparison(self):
        result = disabled_comparison(ComparisonMode.PREVIOUS_YEAR)

        assert result.enabled is False
        assert result.range is None
        assert result.mode == ComparisonMode.PREVIOUS_YEAR

    def test_to_dict(self, primary):
        result = resolve_comparison(primary, ComparisonMode.PREVIOUS_PERIOD).to_dict()

        assert result["enabled"] is True
        assert result["mode"] == "previous_period"
        assert result["range"]["start_date"] == "2026-02-22"
        assert result["range"]["end_date"] == "2026-02-28"

    def test_disabled_to_dict_has_no_range(self):
        assert "range" not in disabled_comparison(ComparisonMode.CUSTOM).to_dict()

    def test_picker_labels_match_baseline_labels(self):
        """Mode picker and resolved selections share one label per baseline"""
        assert COMPARISON_LABELS[ComparisonMode.PREVIOUS_PERIOD] == PREVIOUS_PERIOD_LABEL
        assert COMPARISON_LABELS[ComparisonMode.PREVIOUS_YEAR] == PREVIOUS_YEAR_LABEL

    def test_comparison_options(self):
        assert comparison_options() == {
            "previous_period": "Previous period",
            "previous_year": "Same period last year",
            "custom": "Custom",
        }
