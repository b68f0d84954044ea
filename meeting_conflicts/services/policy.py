# meeting_conflicts/services/policy.py
from __future__ import annotations

from dataclasses import dataclass

from meeting_conflicts.core.config import Settings


@dataclass(frozen=True)
class ConflictPolicy:
    """
    Tuning constants for the conflict engine.

    The engine never reads settings directly; it is handed one of these.
    """

    buffer_minutes: int = 10
    slot_interval_minutes: int = 15
    workday_start_hour: int = 8
    workday_end_hour: int = 20
    lookahead_days: int = 3
    slots_per_future_day: int = 3
    max_alternatives: int = 5
    daily_meeting_limit: int = 8

    def __post_init__(self) -> None:
        if self.workday_start_hour >= self.workday_end_hour:
            raise ValueError("workday_start_hour must be before workday_end_hour")
        if self.slot_interval_minutes <= 0:
            raise ValueError("slot_interval_minutes must be positive")

    @property
    def workday_start_minutes(self) -> int:
        return self.workday_start_hour * 60

    @property
    def workday_end_minutes(self) -> int:
        return self.workday_end_hour * 60

    @classmethod
    def from_settings(cls, settings: Settings) -> ConflictPolicy:
        return cls(
            buffer_minutes=settings.BUFFER_MINUTES,
            slot_interval_minutes=settings.SLOT_INTERVAL_MINUTES,
            workday_start_hour=settings.WORKDAY_START_HOUR,
            workday_end_hour=settings.WORKDAY_END_HOUR,
            lookahead_days=settings.LOOKAHEAD_DAYS,
            slots_per_future_day=settings.SLOTS_PER_FUTURE_DAY,
            max_alternatives=settings.MAX_ALTERNATIVES,
            daily_meeting_limit=settings.DAILY_MEETING_LIMIT,
        )
