# meeting_conflicts/services/severity.py
from __future__ import annotations

from collections.abc import Iterable

from meeting_conflicts.schemas.conflict import ConflictDetail, Severity

_RANK: dict[Severity, int] = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
}


class SeverityClassifier:
    """
    Maps conflict signals to a three-level severity.

    Rules
    -----
    Mandatory conflicts:
    1) shared attendees >= 3 OR overlap >= 60 minutes  => HIGH
    2) shared attendees >= 2 OR overlap >= 30 minutes  => MEDIUM
    3) otherwise                                       => LOW

    Buffer violations are always MEDIUM, regardless of attendee count.

    The overall severity of an analysis is the highest per-conflict severity,
    or LOW when there are no conflicts.
    """

    @staticmethod
    def classify_overlap(attendee_count: int, overlap_minutes: int) -> Severity:
        if attendee_count >= 3 or overlap_minutes >= 60:
            return Severity.HIGH
        if attendee_count >= 2 or overlap_minutes >= 30:
            return Severity.MEDIUM
        return Severity.LOW

    @staticmethod
    def classify_buffer_violation() -> Severity:
        return Severity.MEDIUM

    @staticmethod
    def rank(severity: Severity) -> int:
        return _RANK[severity]

    @classmethod
    def overall(cls, conflicts: Iterable[ConflictDetail]) -> Severity:
        worst = Severity.LOW
        for conflict in conflicts:
            if cls.rank(conflict.severity) > cls.rank(worst):
                worst = conflict.severity
        return worst
