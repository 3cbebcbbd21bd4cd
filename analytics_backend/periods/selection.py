"""
Committed primary period selection
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from analytics_backend.periods.presets import PresetId, resolve_preset
from analytics_backend.periods.ranges import TimeRange


class SelectionKind(str, Enum):
    PRESET = "preset"
    CUSTOM = "custom"


@dataclass(frozen=True)
class PeriodSelection:
    """
    Either a named preset or a custom date range.

    range always holds the boundaries resolved when the selection was
    committed. Presets are anchored to "now", so resolve() can re-evaluate
    them against a later instant.
    """
    kind: SelectionKind
    range: TimeRange
    preset: Optional[PresetId] = None

    def __post_init__(self):
        if self.kind == SelectionKind.PRESET and self.preset is None:
            raise ValueError("A preset selection requires a preset id")
        if self.kind == SelectionKind.CUSTOM and self.preset is not None:
            raise ValueError("A custom selection cannot carry a preset id")

    @classmethod
    def for_preset(cls, preset: Union[str, PresetId], now: datetime, tz=None) -> "PeriodSelection":
        preset_id = PresetId.parse(preset)
        return cls(kind=SelectionKind.PRESET, range=resolve_preset(preset_id, now, tz), preset=preset_id)

    @classmethod
    def custom(cls, time_range: TimeRange) -> "PeriodSelection":
        return cls(kind=SelectionKind.CUSTOM, range=time_range)

    @property
    def is_custom(self) -> bool:
        return self.kind == SelectionKind.CUSTOM

    @property
    def identifier(self) -> str:
        """Value of the dashboard "period" field: the preset id, or "custom" """
        return SelectionKind.CUSTOM.value if self.is_custom else self.preset.value

    def resolve(self, now: datetime, tz=None) -> TimeRange:
        """Range for a live anchor; custom ranges never move"""
        if self.is_custom:
            return self.range
        return resolve_preset(self.preset, now, tz)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "period": self.identifier,
            "kind": self.kind.value,
            "range": self.range.to_dict(),
        }
