# meeting_conflicts/services/conflict_resolver.py
from __future__ import annotations

from typing import Any

from meeting_conflicts.core.logging import get_logger
from meeting_conflicts.schemas.conflict import (
    ConflictAnalysis,
    ConflictRequest,
    ConflictSuggestion,
    ResolutionOutcome,
    SuggestionType,
)
from meeting_conflicts.schemas.meeting import MeetingRecord
from meeting_conflicts.services.buffer_policy import BufferPolicy
from meeting_conflicts.services.conflict_detector import ConflictDetector
from meeting_conflicts.services.meeting_repository import MeetingRepository
from meeting_conflicts.services.policy import ConflictPolicy
from meeting_conflicts.services.severity import SeverityClassifier
from meeting_conflicts.services.slot_search import AlternativeSlotSearch
from meeting_conflicts.services.suggestion_generator import SuggestionGenerator
from meeting_conflicts.services.time_interval import InvalidTimeError, shift

logger = get_logger(__name__)


class ConflictResolver:
    """
    Entry point of the conflict engine.

    - `analyze` detects overlaps and buffer violations for a candidate meeting,
      classifies them and proposes ranked alternatives. It never writes.
    - `resolve` applies one chosen suggestion to a stored meeting.

    The resolver holds no mutable state; all state lives in the repository it
    is constructed with.
    """

    def __init__(
        self,
        repository: MeetingRepository,
        policy: ConflictPolicy | None = None,
    ) -> None:
        self.repository = repository
        self.policy = policy or ConflictPolicy()

        self.detector = ConflictDetector()
        self.buffer_policy = BufferPolicy(self.policy.buffer_minutes)
        self.slot_search = AlternativeSlotSearch(self.detector, self.buffer_policy, self.policy)
        self.suggestion_generator = SuggestionGenerator()

    async def analyze(self, request: ConflictRequest) -> ConflictAnalysis:
        """
        Analyse a candidate meeting against the meetings already on its date.

        Overlap conflicts come first, then buffer violations, each in the
        repository's meeting order.
        """
        meetings = await self.repository.get_meetings_for_date(request.date)

        conflicts = self.detector.detect(request, meetings)
        conflicts.extend(self.buffer_policy.check_buffer(request, meetings))

        suggestions = []
        if conflicts:
            alternatives = await self.slot_search.find_alternatives(request, self.repository)
            suggestions = self.suggestion_generator.generate(request, conflicts, alternatives)

        analysis = ConflictAnalysis(
            has_conflicts=bool(conflicts),
            conflicts=conflicts,
            suggestions=suggestions,
            severity=SeverityClassifier.overall(conflicts),
            total_conflicts=len(conflicts),
        )

        logger.info(
            "conflict_analysis_completed",
            date=request.date.isoformat(),
            start_time=str(request.start_time),
            end_time=str(request.end_time),
            total_conflicts=analysis.total_conflicts,
            severity=analysis.severity.value,
            suggestions=len(analysis.suggestions),
        )
        return analysis

    async def resolve(
        self,
        meeting_id: int,
        suggestion: ConflictSuggestion,
        expected_version: int | None = None,
    ) -> ResolutionOutcome:
        """
        Apply `suggestion` to the stored meeting `meeting_id`.

        Rules
        -----
        - Unknown meeting                           => MEETING_NOT_FOUND
        - `expected_version` given and stale        => VERSION_CONFLICT
        - reschedule       => writes the new date/start/end
        - remove_attendee  => drops the listed names from optional attendees
        - shorten_duration => recomputes the end from start + new duration
        - any other type                            => UNSUPPORTED_SUGGESTION
        - supported type without its payload, or a
          new end time past midnight                => INVALID_SUGGESTION
        - meeting changed between read and write    => VERSION_CONFLICT

        The change is not re-checked for new conflicts; callers re-run
        `analyze` for that. Repository failures propagate.
        """
        outcome = await self._apply(meeting_id, suggestion, expected_version)
        logger.info(
            "conflict_resolution_finished",
            meeting_id=meeting_id,
            suggestion_id=suggestion.suggestion_id,
            suggestion_type=suggestion.type.value,
            outcome=outcome.value,
        )
        return outcome

    async def _apply(
        self,
        meeting_id: int,
        suggestion: ConflictSuggestion,
        expected_version: int | None,
    ) -> ResolutionOutcome:
        meeting = await self.repository.get_meeting(meeting_id)
        if meeting is None:
            return ResolutionOutcome.MEETING_NOT_FOUND

        if expected_version is not None and expected_version != meeting.version:
            return ResolutionOutcome.VERSION_CONFLICT

        if suggestion.type not in _SUPPORTED:
            return ResolutionOutcome.UNSUPPORTED_SUGGESTION

        changes = _changes_for(meeting, suggestion)
        if changes is None:
            return ResolutionOutcome.INVALID_SUGGESTION

        updated = await self.repository.update_meeting(
            meeting_id, changes, expected_version=meeting.version
        )
        if updated is None:
            return ResolutionOutcome.VERSION_CONFLICT

        return ResolutionOutcome.APPLIED


_SUPPORTED = frozenset(
    {
        SuggestionType.RESCHEDULE,
        SuggestionType.REMOVE_ATTENDEE,
        SuggestionType.SHORTEN_DURATION,
    }
)


def _changes_for(meeting: MeetingRecord, suggestion: ConflictSuggestion) -> dict[str, Any] | None:
    """
    Partial update for a supported suggestion, or None if it cannot be applied.
    """
    if suggestion.type is SuggestionType.RESCHEDULE:
        slot = suggestion.new_time_slot
        if slot is None or slot.start_time >= slot.end_time:
            return None
        return {"date": slot.date, "start_time": slot.start_time, "end_time": slot.end_time}

    if suggestion.type is SuggestionType.REMOVE_ATTENDEE:
        if suggestion.attendee_changes is None:
            return None
        removed = set(suggestion.attendee_changes.remove)
        return {
            "optional_attendees": [
                name for name in meeting.optional_attendees if name not in removed
            ]
        }

    if suggestion.type is SuggestionType.SHORTEN_DURATION:
        if not suggestion.duration_change:
            return None
        try:
            new_end = shift(meeting.start_time, suggestion.duration_change)
        except InvalidTimeError:
            return None
        return {"end_time": new_end}

    return None
