# tests/test_conflicts_api.py
from datetime import date
from http import HTTPStatus

from meeting_conflicts.services.meeting_repository import MeetingRepositoryError


def _analyze_payload(
    start: str = "09:30",
    end: str = "10:30",
    mandatory=("Alice",),
    optional=None,
    day: str = "2025-06-02",
    exclude: int | None = None,
) -> dict:
    payload = {
        "date": day,
        "startTime": start,
        "endTime": end,
        "mandatoryAttendees": list(mandatory),
    }
    if optional is not None:
        payload["optionalAttendees"] = list(optional)
    if exclude is not None:
        payload["excludeMeetingId"] = exclude
    return payload


# --------------------------------------------------------------------------
# POST /conflicts/analyze
# --------------------------------------------------------------------------

def test_analyze_without_meetings_returns_empty_analysis(client):
    response = client.post("/conflicts/analyze", json=_analyze_payload())

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {
        "hasConflicts": False,
        "conflicts": [],
        "suggestions": [],
        "severity": "low",
        "totalConflicts": 0,
    }


def test_analyze_reports_conflict_in_camel_case(client, repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"], title="Brand sync")

    response = client.post("/conflicts/analyze", json=_analyze_payload())

    assert response.status_code == HTTPStatus.OK
    data = response.json()
    assert data["hasConflicts"] is True
    assert data["totalConflicts"] == 1
    assert data["severity"] == "medium"

    conflict = data["conflicts"][0]
    assert conflict["conflictId"] == f"attendee-{meeting.id}"
    assert conflict["type"] == "mandatory_conflict"
    assert conflict["affectedAttendees"] == ["Alice"]
    assert conflict["conflictDuration"] == 30
    assert conflict["conflictingMeeting"]["title"] == "Brand sync"
    assert conflict["conflictingMeeting"]["startTime"] == "09:00"
    assert conflict["conflictingMeeting"]["date"] == "2025-06-02"

    top = data["suggestions"][0]
    assert top["type"] == "reschedule"
    assert top["priority"] == "high"
    assert top["newTimeSlot"] == {"date": "2025-06-02", "startTime": "10:15", "endTime": "11:15"}
    assert top["feasibilityScore"] == 91
    assert top["impactLevel"] == "minimal"


def test_analyze_accepts_exclude_meeting_id(client, repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])

    response = client.post("/conflicts/analyze", json=_analyze_payload(exclude=meeting.id))

    assert response.status_code == HTTPStatus.OK
    assert response.json()["hasConflicts"] is False


def test_analyze_rejects_malformed_time(client):
    for bad in ("9:75", "9:30", "25:00", "noon"):
        response = client.post("/conflicts/analyze", json=_analyze_payload(start=bad))
        assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY, bad


def test_analyze_rejects_end_before_start(client):
    response = client.post("/conflicts/analyze", json=_analyze_payload(start="11:00", end="10:00"))
    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_analyze_requires_mandatory_attendees(client):
    payload = _analyze_payload()
    del payload["mandatoryAttendees"]

    response = client.post("/conflicts/analyze", json=payload)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_analyze_returns_500_when_storage_fails(client, repo):
    repo.error = MeetingRepositoryError("storage unavailable")

    response = client.post("/conflicts/analyze", json=_analyze_payload())

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json()["detail"] == "Failed to analyze conflicts"


# --------------------------------------------------------------------------
# POST /conflicts/resolve
# --------------------------------------------------------------------------

def _resolve_payload(meeting_id: int, suggestion: dict, expected_version: int | None = None) -> dict:
    payload = {
        "meetingId": meeting_id,
        "suggestionId": suggestion["suggestionId"],
        "suggestion": suggestion,
    }
    if expected_version is not None:
        payload["expectedVersion"] = expected_version
    return payload


def test_analyze_then_resolve_applies_top_suggestion(client, repo):
    repo.add("09:00", "10:00", mandatory=["Alice"])
    edited = repo.add("09:30", "10:30", mandatory=["Alice"])

    analysis = client.post(
        "/conflicts/analyze", json=_analyze_payload(exclude=edited.id)
    ).json()
    top = analysis["suggestions"][0]

    response = client.post(
        "/conflicts/resolve",
        json=_resolve_payload(edited.id, top, expected_version=edited.version),
    )

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"message": "Conflict resolved successfully"}
    stored = repo.meetings[edited.id]
    assert str(stored.start_time) == top["newTimeSlot"]["startTime"]
    assert stored.date == date(2025, 6, 2)

    # The moved meeting no longer collides.
    recheck = client.post(
        "/conflicts/analyze",
        json=_analyze_payload(
            start=top["newTimeSlot"]["startTime"],
            end=top["newTimeSlot"]["endTime"],
            exclude=edited.id,
        ),
    )
    assert recheck.json()["hasConflicts"] is False


def _shorten_suggestion(duration: int = 45, type_: str = "shorten_duration") -> dict:
    return {
        "suggestionId": "shorten-duration",
        "type": type_,
        "description": "Reduce meeting duration",
        "durationChange": duration,
        "priority": "low",
        "feasibilityScore": 70,
        "impactLevel": "moderate",
    }


def test_resolve_unknown_meeting_returns_404(client):
    response = client.post("/conflicts/resolve", json=_resolve_payload(404, _shorten_suggestion()))

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert "not found" in response.json()["detail"]


def test_resolve_unsupported_type_returns_400(client, repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])

    response = client.post(
        "/conflicts/resolve",
        json=_resolve_payload(meeting.id, _shorten_suggestion(type_="split_meeting")),
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert repo.meetings[meeting.id] == meeting


def test_resolve_stale_version_returns_409(client, repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])

    first = client.post(
        "/conflicts/resolve",
        json=_resolve_payload(meeting.id, _shorten_suggestion(), expected_version=1),
    )
    second = client.post(
        "/conflicts/resolve",
        json=_resolve_payload(meeting.id, _shorten_suggestion(30), expected_version=1),
    )

    assert first.status_code == HTTPStatus.OK
    assert second.status_code == HTTPStatus.CONFLICT
    assert str(repo.meetings[meeting.id].end_time) == "09:45"


def test_resolve_rejects_invalid_feasibility_score(client, repo):
    meeting = repo.add("09:00", "10:00", mandatory=["Alice"])
    suggestion = _shorten_suggestion()
    suggestion["feasibilityScore"] = 150

    response = client.post("/conflicts/resolve", json=_resolve_payload(meeting.id, suggestion))

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_resolve_returns_500_when_storage_fails(client, repo):
    repo.error = MeetingRepositoryError("storage unavailable")

    response = client.post("/conflicts/resolve", json=_resolve_payload(1, _shorten_suggestion()))

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json()["detail"] == "Failed to resolve conflict"


# --------------------------------------------------------------------------
# POST /meetings/check-conflicts
# --------------------------------------------------------------------------

def test_check_conflicts_outside_working_hours(client):
    response = client.post(
        "/meetings/check-conflicts", json=_analyze_payload(start="07:30", end="08:30")
    )

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {
        "hasConflicts": True,
        "conflicts": ["Meetings must be scheduled between 08:00 and 20:00"],
    }


def test_check_conflicts_reports_double_booking(client, repo):
    repo.add("09:00", "10:00", mandatory=["Alice", "Bob"], title="Brand sync")

    response = client.post(
        "/meetings/check-conflicts",
        json=_analyze_payload(mandatory=["Alice", "Bob", "Carol"]),
    )

    assert response.json() == {
        "hasConflicts": True,
        "conflicts": ['Alice, Bob already has "Brand sync" scheduled at 09:00-10:00'],
    }


def test_check_conflicts_reports_daily_limit(client, repo):
    for hour in range(8, 16):
        repo.add(f"{hour:02d}:00", f"{hour:02d}:30", mandatory=["Alice"])

    response = client.post(
        "/meetings/check-conflicts", json=_analyze_payload(start="18:00", end="18:30")
    )

    assert response.json() == {
        "hasConflicts": True,
        "conflicts": ["Alice already has 8 meetings scheduled for this day"],
    }


def test_check_conflicts_free_slot(client, repo):
    repo.add("09:00", "10:00", mandatory=["Alice"])

    response = client.post(
        "/meetings/check-conflicts", json=_analyze_payload(start="10:00", end="11:00")
    )

    assert response.json() == {"hasConflicts": False, "conflicts": []}
