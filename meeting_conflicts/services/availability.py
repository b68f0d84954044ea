# meeting_conflicts/services/availability.py
from __future__ import annotations

from meeting_conflicts.schemas.conflict import AvailabilityCheckResult, ConflictRequest
from meeting_conflicts.services.conflict_detector import ConflictDetector, candidate_meetings
from meeting_conflicts.services.meeting_repository import MeetingRepository
from meeting_conflicts.services.policy import ConflictPolicy


class AvailabilityChecker:
    """
    Quick yes/no availability check used by meeting forms before saving.

    Unlike `ConflictResolver.analyze` it returns plain messages and no
    suggestions.

    Rules
    -----
    1) Outside the working window      => single "working hours" message
    2) Every overlapping meeting that shares mandatory attendees
                                       => "<names> already has ..." message
    3) Every mandatory attendee already at the daily meeting limit
                                       => "<name> already has N meetings ..." message
    """

    def __init__(
        self,
        repository: MeetingRepository,
        policy: ConflictPolicy | None = None,
    ) -> None:
        self.repository = repository
        self.policy = policy or ConflictPolicy()
        self.detector = ConflictDetector()

    async def check(self, request: ConflictRequest) -> AvailabilityCheckResult:
        if (
            request.start_time.minutes < self.policy.workday_start_minutes
            or request.end_time.minutes > self.policy.workday_end_minutes
        ):
            return AvailabilityCheckResult(
                has_conflicts=True,
                conflicts=[
                    "Meetings must be scheduled between "
                    f"{self.policy.workday_start_hour:02d}:00 and "
                    f"{self.policy.workday_end_hour:02d}:00"
                ],
            )

        meetings = await self.repository.get_meetings_for_date(request.date)
        messages: list[str] = []

        for conflict in self.detector.detect(request, meetings):
            meeting = conflict.conflicting_meeting
            messages.append(
                f"{', '.join(conflict.affected_attendees)} already has "
                f'"{meeting.title}" scheduled at {meeting.start_time}-{meeting.end_time}'
            )

        same_day = list(candidate_meetings(request, meetings))
        limit = self.policy.daily_meeting_limit
        for attendee in request.mandatory_attendees:
            booked = sum(1 for m in same_day if attendee in m.mandatory_attendees)
            if booked >= limit:
                messages.append(f"{attendee} already has {limit} meetings scheduled for this day")

        return AvailabilityCheckResult(has_conflicts=bool(messages), conflicts=messages)
