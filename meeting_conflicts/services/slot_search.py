# meeting_conflicts/services/slot_search.py
from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from datetime import date as date_type

from meeting_conflicts.schemas.conflict import AlternativeSlot, ConflictRequest
from meeting_conflicts.schemas.meeting import MeetingRecord
from meeting_conflicts.services.buffer_policy import BufferPolicy
from meeting_conflicts.services.conflict_detector import ConflictDetector
from meeting_conflicts.services.meeting_repository import MeetingRepository
from meeting_conflicts.services.policy import ConflictPolicy
from meeting_conflicts.services.time_interval import ClockTime, add_days


class AlternativeSlotSearch:
    """
    Looks for conflict-free windows of the requested duration.

    Search order
    ------------
    1) Every grid slot (default 15 minutes) inside the working window
       (default 08:00-20:00) of the requested day. Score decays with distance
       from the requested start: max(20, 100 - |diff| // 5).
    2) Only if fewer than 3 same-day slots are free: the first few grid slots
       (default 3) of each of the following days (default 3). Score depends on
       the day offset only: max(50, 90 - offset * 10).

    All candidates are merged, sorted by score (stable) and the best few
    (default 5) returned. A candidate is free when neither the detector nor the
    buffer policy reports anything for it, so every returned slot re-analyses
    clean.

    Meetings for all searched days are fetched with a single repository call.
    """

    MIN_SAME_DAY_RESULTS = 3

    def __init__(
        self,
        detector: ConflictDetector,
        buffer_policy: BufferPolicy,
        policy: ConflictPolicy | None = None,
    ) -> None:
        self.detector = detector
        self.buffer_policy = buffer_policy
        self.policy = policy or ConflictPolicy()

    async def find_alternatives(
        self,
        request: ConflictRequest,
        repository: MeetingRepository,
    ) -> list[AlternativeSlot]:
        days = [add_days(request.date, offset) for offset in range(self.policy.lookahead_days + 1)]
        meetings_by_day = await repository.get_meetings_for_dates(days)
        return self.search(request, meetings_by_day)

    def search(
        self,
        request: ConflictRequest,
        meetings_by_day: Mapping[date_type, Sequence[MeetingRecord]],
    ) -> list[AlternativeSlot]:
        duration = request.duration_minutes

        slots = [
            AlternativeSlot(
                date=request.date,
                start_time=start,
                end_time=end,
                score=self.score_same_day(start, request.start_time),
            )
            for start, end in self.candidate_windows(duration)
            if self._is_free(request, request.date, start, end, meetings_by_day)
        ]

        if len(slots) < self.MIN_SAME_DAY_RESULTS:
            for offset in range(1, self.policy.lookahead_days + 1):
                day = add_days(request.date, offset)
                leading = list(self.candidate_windows(duration))[: self.policy.slots_per_future_day]
                for start, end in leading:
                    if self._is_free(request, day, start, end, meetings_by_day):
                        slots.append(
                            AlternativeSlot(
                                date=day,
                                start_time=start,
                                end_time=end,
                                score=self.score_future_day(offset),
                            )
                        )

        slots.sort(key=lambda slot: slot.score, reverse=True)
        return slots[: self.policy.max_alternatives]

    def candidate_windows(self, duration_minutes: int) -> Iterator[tuple[ClockTime, ClockTime]]:
        """
        Grid-aligned (start, end) pairs that fit entirely inside the working window.
        """
        first = self.policy.workday_start_minutes
        last_end = self.policy.workday_end_minutes
        for start in range(first, last_end, self.policy.slot_interval_minutes):
            end = start + duration_minutes
            if end <= last_end:
                yield ClockTime.from_minutes(start), ClockTime.from_minutes(end)

    @staticmethod
    def score_same_day(candidate_start: ClockTime, original_start: ClockTime) -> int:
        diff = abs(candidate_start.minutes - original_start.minutes)
        return max(20, 100 - diff // 5)

    @staticmethod
    def score_future_day(day_offset: int) -> int:
        return max(50, 90 - day_offset * 10)

    def _is_free(
        self,
        request: ConflictRequest,
        day: date_type,
        start: ClockTime,
        end: ClockTime,
        meetings_by_day: Mapping[date_type, Sequence[MeetingRecord]],
    ) -> bool:
        candidate = request.model_copy(update={"date": day, "start_time": start, "end_time": end})
        meetings = meetings_by_day.get(day, [])
        if not self.detector.is_free(candidate, meetings):
            return False
        return not self.buffer_policy.check_buffer(candidate, meetings)
