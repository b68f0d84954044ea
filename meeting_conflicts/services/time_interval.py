# meeting_conflicts/services/time_interval.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date as date_type, timedelta
from typing import Any

from pydantic_core import core_schema

MINUTES_PER_DAY = 24 * 60

_HHMM_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")


class InvalidTimeError(ValueError):
    """
    Raised when a wall-clock time is malformed or falls outside a single day.
    """


@dataclass(frozen=True, order=True)
class ClockTime:
    """
    A validated wall-clock time within one day, stored as minutes since midnight.

    Instances are only created through `parse` or `from_minutes`, so any
    arithmetic downstream can rely on 0 <= minutes < 1440.
    """

    minutes: int

    def __post_init__(self) -> None:
        if not isinstance(self.minutes, int) or isinstance(self.minutes, bool):
            raise InvalidTimeError(f"Minutes must be an integer, got {self.minutes!r}")
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise InvalidTimeError(
                f"{self.minutes} minutes is outside a single day (0-{MINUTES_PER_DAY - 1})"
            )

    @classmethod
    def parse(cls, value: str) -> ClockTime:
        """
        Parse a zero-padded `HH:MM` string (24-hour clock).

        Only the exact two-digit form is accepted, so stored values sort
        chronologically as plain strings.

        Raises
        ------
        InvalidTimeError
            If the value is not `HH:MM`, or hours/minutes are out of range.
        """
        if not isinstance(value, str):
            raise InvalidTimeError(f"Expected an 'HH:MM' string, got {value!r}")

        match = _HHMM_PATTERN.match(value)
        if match is None:
            raise InvalidTimeError(f"Invalid time {value!r}; expected 'HH:MM'")

        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            raise InvalidTimeError(f"Invalid time {value!r}; hours 0-23, minutes 0-59")

        return cls(hours * 60 + minutes)

    @classmethod
    def from_minutes(cls, minutes: int) -> ClockTime:
        return cls(minutes)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    # -- pydantic integration -------------------------------------------------

    @classmethod
    def _validate(cls, value: Any) -> ClockTime:
        if isinstance(value, ClockTime):
            return value
        return cls.parse(value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="always"
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, schema: Any, handler: Any) -> dict[str, Any]:
        return {
            "type": "string",
            "pattern": r"^\d{2}:\d{2}$",
            "description": "24-hour wall-clock time (HH:MM).",
            "examples": ["09:30"],
        }


def to_minutes(value: str) -> int:
    """Minutes since midnight for an `HH:MM` string."""
    return ClockTime.parse(value).minutes


def overlaps(a_start: ClockTime, a_end: ClockTime, b_start: ClockTime, b_end: ClockTime) -> bool:
    """
    Half-open overlap test for `[a_start, a_end)` and `[b_start, b_end)`.

    Back-to-back intervals (one ends exactly when the other starts) do not overlap.
    """
    return a_start.minutes < b_end.minutes and b_start.minutes < a_end.minutes


def overlap_duration(
    a_start: ClockTime, a_end: ClockTime, b_start: ClockTime, b_end: ClockTime
) -> int:
    """Number of minutes shared by both intervals (0 when disjoint)."""
    start = max(a_start.minutes, b_start.minutes)
    end = min(a_end.minutes, b_end.minutes)
    return max(0, end - start)


def buffer_gap(
    a_start: ClockTime,
    a_end: ClockTime,
    b_start: ClockTime,
    b_end: ClockTime,
    buffer_minutes: int = 10,
) -> bool:
    """
    True when the two intervals are disjoint but closer than `buffer_minutes`.

    Overlapping intervals never count as a buffer gap; overlap and buffer
    violation are mutually exclusive. A gap of exactly `buffer_minutes` is fine.
    """
    if overlaps(a_start, a_end, b_start, b_end):
        return False

    # b starts too soon after a ends
    if a_end.minutes <= b_start.minutes < a_end.minutes + buffer_minutes:
        return True

    # b ends too close before a starts
    if a_start.minutes - buffer_minutes < b_end.minutes <= a_start.minutes:
        return True

    return False


def duration_minutes(start: ClockTime, end: ClockTime) -> int:
    return end.minutes - start.minutes


def shift(start: ClockTime, minutes: int) -> ClockTime:
    """
    Move a time forward by `minutes`.

    Raises InvalidTimeError instead of wrapping past midnight.
    """
    return ClockTime.from_minutes(start.minutes + minutes)


def add_days(day: date_type, days: int) -> date_type:
    """Calendar arithmetic; month and year boundaries roll over correctly."""
    return day + timedelta(days=days)
