# meeting_conflicts/services/suggestion_generator.py
from __future__ import annotations

from collections.abc import Sequence

from meeting_conflicts.schemas.conflict import (
    AlternativeSlot,
    AttendeeChanges,
    ConflictDetail,
    ConflictRequest,
    ConflictSuggestion,
    ImpactLevel,
    SuggestionPriority,
    SuggestionType,
)

REMOVE_OPTIONAL_SCORE = 85
SHORTEN_DURATION_SCORE = 70
MIN_SHORTENED_DURATION = 30
SHORTEN_BY_MINUTES = 15


class SuggestionGenerator:
    """
    Turns detected conflicts and alternative slots into ranked suggestions.

    Generation order (categories with nothing to offer are omitted):
    1) one reschedule per alternative slot
    2) removal of optional attendees caught up in a conflict
    3) shortening the meeting by 15 minutes (never below 30)

    The final list is stable-sorted by descending feasibility score.
    """

    def generate(
        self,
        request: ConflictRequest,
        conflicts: Sequence[ConflictDetail],
        alternatives: Sequence[AlternativeSlot],
    ) -> list[ConflictSuggestion]:
        if not conflicts:
            return []

        suggestions: list[ConflictSuggestion] = []
        suggestions.extend(self._reschedule(request, alternatives))

        remove = self._remove_optional(request, conflicts)
        if remove is not None:
            suggestions.append(remove)

        shorten = self._shorten(request)
        if shorten is not None:
            suggestions.append(shorten)

        return sorted(suggestions, key=lambda s: s.feasibility_score, reverse=True)

    def _reschedule(
        self,
        request: ConflictRequest,
        alternatives: Sequence[AlternativeSlot],
    ) -> list[ConflictSuggestion]:
        suggestions = []
        for index, slot in enumerate(alternatives):
            if slot.date == request.date:
                description = f"Reschedule to {slot.start_time} - {slot.end_time}"
            else:
                description = (
                    f"Reschedule to {slot.date.isoformat()} {slot.start_time} - {slot.end_time}"
                )
            suggestions.append(
                ConflictSuggestion(
                    suggestion_id=f"reschedule-{index}",
                    type=SuggestionType.RESCHEDULE,
                    description=description,
                    new_time_slot=slot.as_time_slot(),
                    priority=SuggestionPriority.HIGH if index == 0 else SuggestionPriority.MEDIUM,
                    feasibility_score=slot.score,
                    impact_level=ImpactLevel.MINIMAL,
                )
            )
        return suggestions

    def _remove_optional(
        self,
        request: ConflictRequest,
        conflicts: Sequence[ConflictDetail],
    ) -> ConflictSuggestion | None:
        optional = set(request.optional_attendees)
        conflicting: list[str] = []
        for conflict in conflicts:
            for name in conflict.affected_attendees:
                if name in optional and name not in conflicting:
                    conflicting.append(name)

        if not conflicting:
            return None

        return ConflictSuggestion(
            suggestion_id="remove-optional",
            type=SuggestionType.REMOVE_ATTENDEE,
            description=f"Remove {len(conflicting)} optional attendee(s) with conflicts",
            attendee_changes=AttendeeChanges(remove=conflicting, optional=[]),
            priority=SuggestionPriority.MEDIUM,
            feasibility_score=REMOVE_OPTIONAL_SCORE,
            impact_level=ImpactLevel.MODERATE,
        )

    def _shorten(self, request: ConflictRequest) -> ConflictSuggestion | None:
        duration = request.duration_minutes
        if duration <= MIN_SHORTENED_DURATION:
            return None

        shortened = max(MIN_SHORTENED_DURATION, duration - SHORTEN_BY_MINUTES)
        return ConflictSuggestion(
            suggestion_id="shorten-duration",
            type=SuggestionType.SHORTEN_DURATION,
            description=(
                f"Reduce meeting duration by {duration - shortened} minutes "
                f"(to {shortened} minutes)"
            ),
            duration_change=shortened,
            priority=SuggestionPriority.LOW,
            feasibility_score=SHORTEN_DURATION_SCORE,
            impact_level=ImpactLevel.MODERATE,
        )
