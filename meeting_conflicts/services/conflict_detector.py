# meeting_conflicts/services/conflict_detector.py
from __future__ import annotations

from collections.abc import Iterable, Iterator

from meeting_conflicts.schemas.conflict import ConflictDetail, ConflictRequest, ConflictType
from meeting_conflicts.schemas.meeting import MeetingRecord
from meeting_conflicts.services.severity import SeverityClassifier
from meeting_conflicts.services.time_interval import overlap_duration, overlaps


def shared_attendees(requested: Iterable[str], existing: Iterable[str]) -> list[str]:
    """
    Attendees present in both lists, in the order of `requested`.
    """
    existing_set = set(existing)
    return [name for name in requested if name in existing_set]


def candidate_meetings(
    request: ConflictRequest,
    meetings: Iterable[MeetingRecord],
) -> Iterator[MeetingRecord]:
    """
    Meetings on the request's date, minus the meeting being edited (if any).
    """
    for meeting in meetings:
        if request.exclude_meeting_id is not None and meeting.id == request.exclude_meeting_id:
            continue
        if meeting.date != request.date:
            continue
        yield meeting


class ConflictDetector:
    """
    Finds existing meetings that overlap the requested window and share at
    least one mandatory attendee with it.

    Conflicts are emitted in the order the meetings are given, which is the
    repository's chronological order.
    """

    def detect(
        self,
        request: ConflictRequest,
        meetings: Iterable[MeetingRecord],
    ) -> list[ConflictDetail]:
        conflicts: list[ConflictDetail] = []

        for meeting in candidate_meetings(request, meetings):
            affected = shared_attendees(request.mandatory_attendees, meeting.mandatory_attendees)
            if not affected:
                continue

            if not overlaps(request.start_time, request.end_time, meeting.start_time, meeting.end_time):
                continue

            minutes = overlap_duration(
                request.start_time, request.end_time, meeting.start_time, meeting.end_time
            )
            conflicts.append(
                ConflictDetail(
                    conflict_id=f"attendee-{meeting.id}",
                    type=ConflictType.MANDATORY_CONFLICT,
                    conflicting_meeting=meeting,
                    affected_attendees=affected,
                    conflict_duration=minutes,
                    severity=SeverityClassifier.classify_overlap(len(affected), minutes),
                    description=(
                        f"{len(affected)} mandatory attendee(s) have overlapping commitments"
                    ),
                )
            )

        return conflicts

    def is_free(self, request: ConflictRequest, meetings: Iterable[MeetingRecord]) -> bool:
        """True if the requested window collides with none of the given meetings."""
        return not self.detect(request, meetings)
