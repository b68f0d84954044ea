# meeting_conflicts/schemas/meeting.py
from datetime import date as date_type

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from meeting_conflicts.services.time_interval import ClockTime


class CamelModel(BaseModel):
    """
    Base for all API-facing schemas.

    Attributes are snake_case in Python and camelCase on the wire; both
    spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MeetingRecord(CamelModel):
    """
    Read-only view of a stored meeting, as handed to the conflict engine by
    the meeting repository.

    All meetings are assumed to be normalized to one timezone and to start and
    end on the same day.
    """

    id: int = Field(..., description="Repository identifier of the meeting.", examples=[12])
    title: str = Field("", description="Meeting title.", examples=["Quarterly brand review"])
    scheduler_name: str = Field(
        "",
        description="Name of the person who scheduled the meeting.",
        examples=["Priya Nair"],
    )
    date: date_type = Field(
        ...,
        description="Meeting date (YYYY-MM-DD).",
        examples=["2025-06-02"],
    )
    start_time: ClockTime = Field(..., description="Start time (HH:MM).", examples=["09:00"])
    end_time: ClockTime = Field(..., description="End time (HH:MM).", examples=["10:00"])
    mandatory_attendees: list[str] = Field(
        default_factory=list,
        description="Attendees whose presence is required.",
        examples=[["Alice", "Bob"]],
    )
    optional_attendees: list[str] = Field(
        default_factory=list,
        description="Attendees whose presence is desirable but not required.",
        examples=[["Carol"]],
    )
    version: int = Field(
        1,
        ge=1,
        description="Monotonic version, bumped on every update; used for optimistic concurrency.",
        examples=[3],
    )

    @model_validator(mode="after")
    def check_interval(self) -> "MeetingRecord":
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Meeting {self.id} must start before it ends "
                f"({self.start_time} >= {self.end_time})."
            )
        return self
