"""
Fallback operating hours and slot duration for private dining spaces.
"""

from dataclasses import dataclass
from datetime import time
from typing import NamedTuple, Optional, Protocol


class SpaceOverrides(Protocol):
    """Anything carrying the optional per-space overrides."""

    operating_start_time: Optional[time]
    operating_end_time: Optional[time]
    time_slot_duration_minutes: Optional[int]


class EffectiveSpaceConfig(NamedTuple):
    """Operating hours and slot length actually in force for a space."""
    operating_start: time
    operating_end: time
    slot_minutes: int


@dataclass(frozen=True)
class SpaceDefaults:
    """Process-wide defaults, built once from settings and passed to the services."""
    operating_start: time = time(9, 0)
    operating_end: time = time(22, 0)
    slot_duration_minutes: int = 60

    def __post_init__(self):
        if self.slot_duration_minutes <= 0:
            raise ValueError("slot_duration_minutes must be positive")

    @classmethod
    def from_settings(cls, settings) -> "SpaceDefaults":
        return cls(
            operating_start=settings.space_default_operating_start,
            operating_end=settings.space_default_operating_end,
            slot_duration_minutes=settings.space_default_slot_minutes,
        )

    def operating_start_for(self, space: SpaceOverrides) -> time:
        if space.operating_start_time is not None:
            return space.operating_start_time
        return self.operating_start

    def operating_end_for(self, space: SpaceOverrides) -> time:
        if space.operating_end_time is not None:
            return space.operating_end_time
        return self.operating_end

    def slot_minutes_for(self, space: SpaceOverrides) -> int:
        if space.time_slot_duration_minutes is not None:
            return space.time_slot_duration_minutes
        return self.slot_duration_minutes

    def resolve(self, space: SpaceOverrides) -> EffectiveSpaceConfig:
        """Resolve every field of a space against these defaults."""
        return EffectiveSpaceConfig(
            operating_start=self.operating_start_for(space),
            operating_end=self.operating_end_for(space),
            slot_minutes=self.slot_minutes_for(space),
        )
