# tests/test_conflict_detector.py
from datetime import date

import pytest

from meeting_conflicts.schemas.conflict import ConflictRequest, ConflictType, Severity
from meeting_conflicts.services.buffer_policy import BufferPolicy
from meeting_conflicts.services.conflict_detector import ConflictDetector
from meeting_conflicts.services.severity import SeverityClassifier
from meeting_conflicts.services.time_interval import ClockTime


def _request(start, end, mandatory=("Alice",), optional=(), day=date(2025, 6, 2), exclude=None):
    return ConflictRequest(
        date=day,
        start_time=start,
        end_time=end,
        mandatory_attendees=list(mandatory),
        optional_attendees=list(optional),
        exclude_meeting_id=exclude,
    )


# --------------------------------------------------------------------------
# ConflictDetector
# --------------------------------------------------------------------------

def test_detector_reports_overlap_with_shared_mandatory_attendee(repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])

    conflicts = ConflictDetector().detect(_request("09:30", "10:30"), [meeting])

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.type == ConflictType.MANDATORY_CONFLICT
    assert conflict.conflict_id == f"attendee-{meeting.id}"
    assert conflict.conflicting_meeting.id == meeting.id
    assert conflict.affected_attendees == ["Alice"]
    assert conflict.conflict_duration == 30
    assert conflict.severity == Severity.MEDIUM


def test_detector_ignores_back_to_back_meetings(repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])
    assert ConflictDetector().detect(_request("10:00", "11:00"), [meeting]) == []


def test_detector_ignores_meetings_without_shared_mandatory_attendees(repo):
    only_bob = repo.add("09:00", "10:00", mandatory=["Bob"])
    # Bob is only optional on the request
    request = _request("09:00", "10:00", mandatory=["Alice"], optional=["Bob"])

    assert ConflictDetector().detect(request, [only_bob]) == []


def test_detector_ignores_other_dates_and_excluded_meeting(repo):
    other_day = repo.add("09:00", "10:00", mandatory=["Alice"], day=date(2025, 6, 3))
    edited = repo.add("09:00", "10:00", mandatory=["Alice"])

    request = _request("09:00", "10:00", exclude=edited.id)

    assert ConflictDetector().detect(request, [other_day, edited]) == []


def test_detector_preserves_input_order(repo):
    late = repo.add("11:00", "12:00", mandatory=["Alice"])
    early = repo.add("09:00", "10:00", mandatory=["Alice"])

    conflicts = ConflictDetector().detect(_request("09:00", "12:00"), [late, early])

    assert [c.conflicting_meeting.id for c in conflicts] == [late.id, early.id]


def test_detector_affected_attendees_follow_request_order(repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Carol", "Alice", "Bob"])
    request = _request("09:00", "10:00", mandatory=["Bob", "Alice", "Dave"])

    conflicts = ConflictDetector().detect(request, [meeting])

    assert conflicts[0].affected_attendees == ["Bob", "Alice"]


# --------------------------------------------------------------------------
# BufferPolicy
# --------------------------------------------------------------------------

def test_buffer_violation_reported_with_fixed_duration(repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])

    violations = BufferPolicy(10).check_buffer(_request("10:05", "11:00"), [meeting])

    assert len(violations) == 1
    violation = violations[0]
    assert violation.type == ConflictType.BUFFER_VIOLATION
    assert violation.conflict_id == f"buffer-{meeting.id}"
    assert violation.conflict_duration == 10
    assert violation.severity == Severity.MEDIUM
    assert violation.affected_attendees == ["Alice"]
    assert ConflictDetector().detect(_request("10:05", "11:00"), [meeting]) == []


def test_buffer_boundary_ten_minutes_is_fine_nine_is_not(repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])
    policy = BufferPolicy(10)

    assert policy.check_buffer(_request("10:10", "11:00"), [meeting]) == []
    assert len(policy.check_buffer(_request("10:09", "11:00"), [meeting])) == 1


def test_buffer_violation_before_existing_meeting(repo):
    meeting = repo.add("10:00", "11:00", mandatory=["Alice"])

    violations = BufferPolicy(10).check_buffer(_request("09:00", "09:55"), [meeting])

    assert [v.conflict_id for v in violations] == [f"buffer-{meeting.id}"]


def test_buffer_violation_is_medium_regardless_of_attendee_count(repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice", "Bob", "Carol", "Dave"])
    request = _request("10:00", "10:30", mandatory=["Alice", "Bob", "Carol", "Dave"])

    violations = BufferPolicy(10).check_buffer(request, [meeting])

    assert violations[0].severity == Severity.MEDIUM


def test_buffer_policy_respects_configured_buffer(repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])

    violations = BufferPolicy(20).check_buffer(_request("10:15", "11:00"), [meeting])

    assert violations[0].conflict_duration == 20
    assert "20 minutes" in violations[0].description


def test_overlap_and_buffer_are_mutually_exclusive(repo):
    meeting = repo.add("10:00", "11:00", mandatory=["Alice"])
    detector = ConflictDetector()
    policy = BufferPolicy(10)

    for start in range(8 * 60, 12 * 60, 5):
        request = _request(ClockTime.from_minutes(start), ClockTime.from_minutes(start + 30))
        overlap = detector.detect(request, [meeting])
        buffer = policy.check_buffer(request, [meeting])
        assert not (overlap and buffer), f"both reported for start={request.start_time}"


def test_buffer_policy_rejects_negative_buffer():
    with pytest.raises(ValueError):
        BufferPolicy(-1)


# --------------------------------------------------------------------------
# SeverityClassifier
# --------------------------------------------------------------------------

@pytest.mark.parametrize(
    "attendees, minutes, expected",
    [
        (1, 15, Severity.LOW),
        (1, 29, Severity.LOW),
        (1, 30, Severity.MEDIUM),
        (1, 59, Severity.MEDIUM),
        (1, 60, Severity.HIGH),
        (2, 15, Severity.MEDIUM),
        (3, 15, Severity.HIGH),
    ],
)
def test_overlap_severity_thresholds(attendees, minutes, expected):
    assert SeverityClassifier.classify_overlap(attendees, minutes) == expected


@pytest.mark.parametrize("minutes", [5, 30, 45, 90])
def test_severity_never_decreases_with_more_shared_attendees(minutes):
    ranks = [
        SeverityClassifier.rank(SeverityClassifier.classify_overlap(count, minutes))
        for count in (1, 2, 3)
    ]
    assert ranks == sorted(ranks)


def test_overall_severity_is_the_maximum(repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice", "Bob", "Carol"])
    detector = ConflictDetector()

    low = detector.detect(_request("09:50", "10:30", mandatory=["Alice"]), [meeting])
    high = detector.detect(_request("09:50", "10:30", mandatory=["Alice", "Bob", "Carol"]), [meeting])

    assert SeverityClassifier.overall(low) == Severity.LOW
    assert SeverityClassifier.overall(low + high) == Severity.HIGH
    assert SeverityClassifier.overall([]) == Severity.LOW
