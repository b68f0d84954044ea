# meeting_conflicts/services/buffer_policy.py
from __future__ import annotations

from collections.abc import Iterable

from meeting_conflicts.schemas.conflict import ConflictDetail, ConflictRequest, ConflictType
from meeting_conflicts.schemas.meeting import MeetingRecord
from meeting_conflicts.services.conflict_detector import candidate_meetings, shared_attendees
from meeting_conflicts.services.severity import SeverityClassifier
from meeting_conflicts.services.time_interval import buffer_gap, overlaps


class BufferPolicy:
    """
    Flags near-misses: meetings sharing a mandatory attendee with the request
    that do not overlap it but leave less than `buffer_minutes` in between.

    Overlapping meetings are skipped here; the ConflictDetector reports them.
    """

    def __init__(self, buffer_minutes: int = 10) -> None:
        if buffer_minutes < 0:
            raise ValueError("buffer_minutes must not be negative")
        self.buffer_minutes = buffer_minutes

    def check_buffer(
        self,
        request: ConflictRequest,
        meetings: Iterable[MeetingRecord],
    ) -> list[ConflictDetail]:
        violations: list[ConflictDetail] = []

        for meeting in candidate_meetings(request, meetings):
            affected = shared_attendees(request.mandatory_attendees, meeting.mandatory_attendees)
            if not affected:
                continue

            if overlaps(request.start_time, request.end_time, meeting.start_time, meeting.end_time):
                continue

            if not buffer_gap(
                meeting.start_time,
                meeting.end_time,
                request.start_time,
                request.end_time,
                self.buffer_minutes,
            ):
                continue

            violations.append(
                ConflictDetail(
                    conflict_id=f"buffer-{meeting.id}",
                    type=ConflictType.BUFFER_VIOLATION,
                    conflicting_meeting=meeting,
                    affected_attendees=affected,
                    # Reported as the configured buffer, not the actual gap.
                    conflict_duration=self.buffer_minutes,
                    severity=SeverityClassifier.classify_buffer_violation(),
                    description=(
                        f"Less than {self.buffer_minutes} minutes buffer between meetings"
                    ),
                )
            )

        return violations
