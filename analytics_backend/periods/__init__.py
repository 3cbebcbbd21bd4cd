"""
Periods Module - period selection and comparison resolution for analytics dashboards
"""

from analytics_backend.periods.ranges import TimeRange, start_of_day, end_of_day
from analytics_backend.periods.presets import (
    PresetId,
    FALLBACK_PRESET,
    resolve_preset,
    preset_options,
)
from analytics_backend.periods.custom_range import NormalizedRange, normalize_custom_range
from analytics_backend.periods.comparison import (
    ComparisonMode,
    ComparisonSelection,
    resolve_comparison,
    derive_comparison,
    comparison_options,
)
from analytics_backend.periods.selection import PeriodSelection, SelectionKind
from analytics_backend.periods.controller import (
    SelectionController,
    ControllerState,
    EditBuffer,
)

__all__ = [
    'TimeRange',
    'start_of_day',
    'end_of_day',
    'PresetId',
    'FALLBACK_PRESET',
    'resolve_preset',
    'preset_options',
    'NormalizedRange',
    'normalize_custom_range',
    'ComparisonMode',
    'ComparisonSelection',
    'resolve_comparison',
    'derive_comparison',
    'comparison_options',
    'PeriodSelection',
    'SelectionKind',
    'SelectionController',
    'ControllerState',
    'EditBuffer',
]
