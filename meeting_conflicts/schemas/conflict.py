# meeting_conflicts/schemas/conflict.py
from __future__ import annotations

from datetime import date as date_type
from enum import Enum

from pydantic import Field, field_validator, model_validator

from meeting_conflicts.schemas.meeting import CamelModel, MeetingRecord
from meeting_conflicts.services.time_interval import ClockTime


# --------------------------------------------------------------------------
# Enumerations
# --------------------------------------------------------------------------

class ConflictType(str, Enum):
    """
    Kind of collision between a requested meeting and an existing one.
    """

    ATTENDEE_OVERLAP = "attendee_overlap"
    BUFFER_VIOLATION = "buffer_violation"
    MANDATORY_CONFLICT = "mandatory_conflict"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SuggestionType(str, Enum):
    RESCHEDULE = "reschedule"
    REMOVE_ATTENDEE = "remove_attendee"
    SHORTEN_DURATION = "shorten_duration"
    BUFFER_ADJUSTMENT = "buffer_adjustment"
    SPLIT_MEETING = "split_meeting"


class SuggestionPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ImpactLevel(str, Enum):
    MINIMAL = "minimal"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


class ResolutionOutcome(str, Enum):
    """
    Result of applying a suggestion to a stored meeting.

    Only APPLIED mutates the meeting; every other outcome leaves it untouched.
    """

    APPLIED = "applied"
    MEETING_NOT_FOUND = "meeting_not_found"
    UNSUPPORTED_SUGGESTION = "unsupported_suggestion"
    INVALID_SUGGESTION = "invalid_suggestion"
    VERSION_CONFLICT = "version_conflict"

    @property
    def succeeded(self) -> bool:
        return self is ResolutionOutcome.APPLIED


# --------------------------------------------------------------------------
# Request
# --------------------------------------------------------------------------

def _dedupe(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


class ConflictRequest(CamelModel):
    """
    A candidate meeting to be checked against existing commitments.

    Used both as the body of POST /conflicts/analyze and as the engine input.
    """

    date: date_type = Field(..., description="Requested date (YYYY-MM-DD).", examples=["2025-06-02"])
    start_time: ClockTime = Field(..., description="Requested start (HH:MM).", examples=["09:30"])
    end_time: ClockTime = Field(..., description="Requested end (HH:MM).", examples=["10:30"])
    mandatory_attendees: list[str] = Field(
        ...,
        description="Attendees whose presence is required.",
        examples=[["Alice"]],
    )
    optional_attendees: list[str] = Field(
        default_factory=list,
        description="Attendees whose presence is desirable but not required.",
        examples=[["Carol"]],
    )
    exclude_meeting_id: int | None = Field(
        None,
        description=(
            "Meeting to ignore while checking, typically the meeting being edited "
            "so it does not collide with itself."
        ),
        examples=[12],
    )

    @field_validator("mandatory_attendees", "optional_attendees")
    @classmethod
    def dedupe_attendees(cls, names: list[str]) -> list[str]:
        return _dedupe(names)

    @model_validator(mode="after")
    def check_interval(self) -> ConflictRequest:
        if self.start_time >= self.end_time:
            raise ValueError("startTime must be before endTime.")
        return self

    @property
    def duration_minutes(self) -> int:
        return self.end_time.minutes - self.start_time.minutes


# --------------------------------------------------------------------------
# Conflicts
# --------------------------------------------------------------------------

class ConflictDetail(CamelModel):
    """
    One collision between the request and an existing meeting.
    """

    conflict_id: str = Field(
        ...,
        description="Identifier unique within one analysis (type prefix + meeting id).",
        examples=["attendee-12"],
    )
    type: ConflictType = Field(..., description="Kind of collision.")
    conflicting_meeting: MeetingRecord = Field(..., description="The existing meeting collided with.")
    affected_attendees: list[str] = Field(
        ...,
        description="Mandatory attendees shared by both meetings.",
        examples=[["Alice"]],
    )
    conflict_duration: int = Field(
        ...,
        ge=0,
        description=(
            "Overlap in minutes for mandatory conflicts; the configured buffer for "
            "buffer violations."
        ),
        examples=[30],
    )
    severity: Severity = Field(..., description="How disruptive this conflict is.")
    description: str = Field(..., description="Human-readable summary.")


# --------------------------------------------------------------------------
# Suggestions
# --------------------------------------------------------------------------

class TimeSlot(CamelModel):
    date: date_type = Field(..., examples=["2025-06-02"])
    start_time: ClockTime = Field(..., examples=["11:00"])
    end_time: ClockTime = Field(..., examples=["12:00"])


class AlternativeSlot(TimeSlot):
    """
    A conflict-free window found by the slot search, with its ranking score.
    """

    score: int = Field(..., ge=0, le=100, examples=[88])

    def as_time_slot(self) -> TimeSlot:
        return TimeSlot(date=self.date, start_time=self.start_time, end_time=self.end_time)


class AttendeeChanges(CamelModel):
    remove: list[str] = Field(default_factory=list, description="Attendees to drop.")
    optional: list[str] = Field(
        default_factory=list,
        description="Attendees to demote from mandatory to optional.",
    )


class ConflictSuggestion(CamelModel):
    """
    A proposed change that would remove or reduce the detected conflicts.
    """

    suggestion_id: str = Field(
        ...,
        description="Identifier unique within one analysis.",
        examples=["reschedule-0"],
    )
    type: SuggestionType = Field(..., description="Kind of change proposed.")
    description: str = Field(..., description="Human-readable summary.")
    new_time_slot: TimeSlot | None = Field(
        None,
        description="Target slot for reschedule suggestions.",
    )
    attendee_changes: AttendeeChanges | None = Field(
        None,
        description="Attendee removals/demotions for remove_attendee suggestions.",
    )
    duration_change: int | None = Field(
        None,
        gt=0,
        description="New meeting duration in minutes for shorten_duration suggestions.",
        examples=[45],
    )
    priority: SuggestionPriority = Field(...)
    feasibility_score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Heuristic 0-100 ranking of how workable the suggestion is.",
        examples=[85],
    )
    impact_level: ImpactLevel = Field(...)


# --------------------------------------------------------------------------
# Analysis
# --------------------------------------------------------------------------

class ConflictAnalysis(CamelModel):
    """
    Full result of analysing one ConflictRequest.
    """

    has_conflicts: bool = Field(..., description="True iff `conflicts` is non-empty.")
    conflicts: list[ConflictDetail] = Field(
        default_factory=list,
        description="Overlap conflicts first, then buffer violations, each in meeting order.",
    )
    suggestions: list[ConflictSuggestion] = Field(
        default_factory=list,
        description="Suggestions ordered by descending feasibility score.",
    )
    severity: Severity = Field(
        Severity.LOW,
        description="Highest severity across all conflicts (low when there are none).",
    )
    total_conflicts: int = Field(0, ge=0)


# --------------------------------------------------------------------------
# Resolution API
# --------------------------------------------------------------------------

class ResolveConflictRequest(CamelModel):
    meeting_id: int = Field(..., ge=1, description="Meeting to modify.", examples=[12])
    suggestion_id: str = Field(..., description="Identifier of the chosen suggestion.")
    suggestion: ConflictSuggestion = Field(..., description="The chosen suggestion, as returned by analyze.")
    expected_version: int | None = Field(
        None,
        ge=1,
        description=(
            "Version of the meeting the caller last read. When given and stale, "
            "the request is rejected with 409 and nothing is changed."
        ),
    )


class ResolveConflictResponse(CamelModel):
    message: str = Field(..., examples=["Conflict resolved successfully"])


# --------------------------------------------------------------------------
# Quick availability check
# --------------------------------------------------------------------------

class AvailabilityCheckResult(CamelModel):
    has_conflicts: bool = Field(...)
    conflicts: list[str] = Field(
        default_factory=list,
        description="Human-readable reasons the requested slot is not available.",
    )
