"""
Selection Controller - keeps the primary period and the comparison baseline in sync

The controller is a two-state machine:

    COMMITTED  steady state; one committed PeriodSelection and ComparisonSelection
    EDITING    the date range picker is open; tentative dates live in an EditBuffer

Actions run synchronously and always leave a valid committed state. Invalid
input never raises; it is logged and leaves committed state untouched.
Registered handlers are called after every change to the committed period or
comparison, once both have been updated.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

import structlog

from analytics_backend.periods.comparison import (
    CUSTOM_COMPARISON_LABEL,
    ComparisonMode,
    ComparisonSelection,
    derive_comparison,
    disabled_comparison,
    resolve_comparison,
)
from analytics_backend.periods.custom_range import normalize_custom_range
from analytics_backend.periods.presets import FALLBACK_PRESET, PresetId
from analytics_backend.periods.query_params import comparison_query_params, period_query_params
from analytics_backend.periods.ranges import DayLike, TimeRange
from analytics_backend.periods.selection import PeriodSelection
from analytics_backend.utils.errors import ErrorCode

logger = structlog.get_logger(__name__)

PeriodHandler = Callable[[PeriodSelection], None]
ComparisonHandler = Callable[[ComparisonSelection], None]


class ControllerState(str, Enum):
    COMMITTED = "committed"
    EDITING = "editing"


@dataclass
class EditBuffer:
    """Tentative custom dates while the picker is open"""
    start: Optional[date] = None
    end: Optional[date] = None
    comparison_start: Optional[date] = None
    comparison_end: Optional[date] = None

    @property
    def primary_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def comparison_complete(self) -> bool:
        return self.comparison_start is not None and self.comparison_end is not None


def _as_date(value: Optional[DayLike]) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


class SelectionController:
    """
    Orchestrates preset selection, custom range editing and comparison settings.

    Args:
        default_period: Preset identifier or TimeRange committed on construction
        comparison_enabled: Whether comparison starts switched on
        comparison_mode: Initial comparison mode
        clock: Callable returning the current instant, read once per action
        tz: Optional zone for day boundaries (pytz or tzinfo); None keeps local wall clock
    """

    def __init__(
        self,
        default_period: Union[str, PresetId, TimeRange] = FALLBACK_PRESET,
        comparison_enabled: bool = False,
        comparison_mode: Union[str, ComparisonMode] = ComparisonMode.PREVIOUS_PERIOD,
        clock: Optional[Callable[[], datetime]] = None,
        tz=None
    ):
        self._tz = tz
        self._clock = clock or self._wall_clock
        self._comparison_mode = ComparisonMode(comparison_mode)

        if isinstance(default_period, TimeRange):
            self._period = PeriodSelection.custom(default_period)
        else:
            self._period = PeriodSelection.for_preset(default_period, self._now(), self._tz)

        if comparison_enabled:
            self._comparison = derive_comparison(self._period.range, self._comparison_mode)
        else:
            self._comparison = disabled_comparison(self._comparison_mode)

        self._state = ControllerState.COMMITTED
        self._buffer: Optional[EditBuffer] = None
        self._comparison_surface_open = False
        self._period_handlers: List[PeriodHandler] = []
        self._comparison_handlers: List[ComparisonHandler] = []

        logger.info(
            "Selection controller initialized",
            period=self._period.identifier,
            comparison_enabled=self._comparison.enabled,
            comparison_mode=self._comparison_mode.value
        )

    @classmethod
    def from_settings(cls, settings, clock: Optional[Callable[[], datetime]] = None) -> "SelectionController":
        """Build a controller from application Settings"""
        return cls(
            default_period=settings.default_period,
            comparison_enabled=settings.comparison_enabled,
            comparison_mode=settings.comparison_mode,
            clock=clock,
            tz=settings.tzinfo
        )

    # ------------------------------------------------------------------
    # Committed state
    # ------------------------------------------------------------------

    @property
    def period(self) -> PeriodSelection:
        return self._period

    @property
    def comparison(self) -> ComparisonSelection:
        return self._comparison

    @property
    def comparison_mode(self) -> ComparisonMode:
        """Selected mode; may be custom while the committed comparison still awaits apply"""
        return self._comparison_mode

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def edit_buffer(self) -> Optional[EditBuffer]:
        """Copy of the edit buffer, None outside the EDITING state"""
        if self._buffer is None:
            return None
        return replace(self._buffer)

    @property
    def comparison_surface_open(self) -> bool:
        return self._comparison_surface_open

    def current_range(self, now: Optional[datetime] = None) -> TimeRange:
        """Primary range re-resolved against a live anchor"""
        return self._period.resolve(now or self._now(), self._tz)

    def query_params(self) -> Dict[str, str]:
        return period_query_params(self._period)

    def comparison_query_params(self) -> Optional[Dict[str, str]]:
        return comparison_query_params(self._comparison)

    # ------------------------------------------------------------------
    # Handler registration
    # ------------------------------------------------------------------

    def on_period_change(self, handler: PeriodHandler) -> Callable[[], None]:
        """Register a handler for committed period changes; returns an unsubscribe callable"""
        self._period_handlers.append(handler)
        return lambda: self._remove_handler(self._period_handlers, handler)

    def on_comparison_change(self, handler: ComparisonHandler) -> Callable[[], None]:
        """Register a handler for committed comparison changes; returns an unsubscribe callable"""
        self._comparison_handlers.append(handler)
        return lambda: self._remove_handler(self._comparison_handlers, handler)

    @staticmethod
    def _remove_handler(handlers: list, handler) -> None:
        if handler in handlers:
            handlers.remove(handler)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def select_preset(self, preset: Union[str, PresetId]) -> None:
        """
        Commit a preset immediately and close the picker.

        With comparison on, the baseline is re-derived from the new range. A
        pending custom comparison is not applied here; custom mode yields the
        same-period-last-year baseline (see comparison.derive_comparison).
        """
        period = PeriodSelection.for_preset(preset, self._now(), self._tz)

        comparison = self._comparison
        if comparison.enabled:
            comparison = derive_comparison(period.range, self._comparison_mode)

        self._close_edit()
        logger.info(
            "Preset selected",
            preset=period.preset.value,
            start=period.range.start.isoformat(),
            end=period.range.end.isoformat()
        )
        self._commit(period, comparison)

    def begin_edit(self) -> None:
        """Open the picker, seeding the buffer from the committed selection"""
        self._open_edit()
        self._comparison_surface_open = self._comparison_mode == ComparisonMode.CUSTOM

    def set_edit_range(self, start: Optional[DayLike], end: Optional[DayLike]) -> bool:
        """Update the tentative primary dates; returns False outside EDITING"""
        if self._buffer is None:
            logger.warning("Edit range ignored, picker is closed", code=ErrorCode.NOT_EDITING.value)
            return False
        self._buffer.start = _as_date(start)
        self._buffer.end = _as_date(end)
        return True

    def set_comparison_edit_range(self, start: Optional[DayLike], end: Optional[DayLike]) -> bool:
        """Update the tentative comparison dates; returns False outside EDITING"""
        if self._buffer is None:
            logger.warning("Comparison edit range ignored, picker is closed", code=ErrorCode.NOT_EDITING.value)
            return False
        self._buffer.comparison_start = _as_date(start)
        self._buffer.comparison_end = _as_date(end)
        return True

    def apply_custom_primary(self) -> bool:
        """
        Commit the buffered custom range.

        Returns:
            True when a new selection was committed. An incomplete or invalid
            buffer stays open and untouched, and nothing is committed.
        """
        if self._buffer is None:
            logger.warning("Apply ignored, picker is closed", code=ErrorCode.NOT_EDITING.value)
            return False

        result = normalize_custom_range(self._buffer.start, self._buffer.end, self._tz)
        if not result.ok:
            logger.info("Custom range not applied", code=result.error.value)
            return False

        period = PeriodSelection.custom(result.range)
        comparison = self._comparison
        if comparison.enabled:
            comparison = self._comparison_for_custom_apply(period.range)

        self._close_edit()
        logger.info(
            "Custom range applied",
            start=period.range.start.isoformat(),
            end=period.range.end.isoformat()
        )
        self._commit(period, comparison)
        return True

    def discard_edit(self) -> None:
        """Close the picker without applying; committed state is untouched"""
        if self._state == ControllerState.EDITING:
            logger.debug("Edit discarded")
        self._close_edit()

    def toggle_comparison(self, enabled: bool) -> None:
        """Switch comparison on (recomputed from scratch) or off (range dropped)"""
        if enabled:
            comparison = derive_comparison(self._period.range, self._comparison_mode)
        else:
            comparison = disabled_comparison(self._comparison_mode)
        logger.info("Comparison toggled", enabled=enabled, mode=self._comparison_mode.value)
        self._commit(self._period, comparison)

    def change_comparison_mode(self, mode: Union[str, ComparisonMode]) -> None:
        """
        Change how the baseline is derived.

        Non-custom modes take effect immediately. Custom mode opens the
        comparison picker and defers the update until apply_custom_primary().
        """
        try:
            mode = ComparisonMode(mode)
        except ValueError:
            logger.warning("Unknown comparison mode ignored", mode=mode)
            return

        self._comparison_mode = mode

        if mode == ComparisonMode.CUSTOM:
            if self._state != ControllerState.EDITING:
                self._open_edit()
            self._comparison_surface_open = True
            logger.info("Custom comparison pending apply")
            return

        # A pending custom comparison edit is superseded
        self._comparison_surface_open = False
        if self._buffer is not None:
            self._buffer.comparison_start = None
            self._buffer.comparison_end = None

        if self._comparison.enabled:
            comparison = derive_comparison(self._period.range, mode)
        else:
            comparison = disabled_comparison(mode)
        logger.info("Comparison mode changed", mode=mode.value)
        self._commit(self._period, comparison)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _wall_clock(self) -> datetime:
        if self._tz is None:
            return datetime.now()
        return datetime.now(self._tz)

    def _now(self) -> datetime:
        return self._clock()

    def _open_edit(self) -> None:
        buffer = EditBuffer(start=self._period.range.start_date, end=self._period.range.end_date)
        # Only a committed custom comparison seeds the comparison picker
        if self._comparison.enabled and self._comparison.label == CUSTOM_COMPARISON_LABEL:
            buffer.comparison_start = self._comparison.range.start_date
            buffer.comparison_end = self._comparison.range.end_date
        self._buffer = buffer
        self._state = ControllerState.EDITING

    def _close_edit(self) -> None:
        self._buffer = None
        self._comparison_surface_open = False
        self._state = ControllerState.COMMITTED

    def _comparison_for_custom_apply(self, primary: TimeRange) -> ComparisonSelection:
        if self._comparison_mode == ComparisonMode.CUSTOM and self._buffer.comparison_complete:
            custom = normalize_custom_range(
                self._buffer.comparison_start, self._buffer.comparison_end, self._tz
            )
            if custom.ok:
                return resolve_comparison(primary, ComparisonMode.CUSTOM, custom.range)
            logger.info("Custom comparison range not applied", code=custom.error.value)
        elif self._comparison_mode == ComparisonMode.CUSTOM:
            logger.info(
                "Custom comparison range incomplete",
                code=ErrorCode.COMPARISON_RANGE_INCOMPLETE.value
            )
        return derive_comparison(primary, self._comparison_mode)

    def _commit(self, period: PeriodSelection, comparison: ComparisonSelection) -> None:
        period_changed = period != self._period
        comparison_changed = comparison != self._comparison

        self._period = period
        self._comparison = comparison

        if period_changed:
            for handler in list(self._period_handlers):
                handler(period)
        if comparison_changed:
            for handler in list(self._comparison_handlers):
                handler(comparison)
