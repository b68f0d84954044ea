# tests/conftest.py
import os
import tempfile
from collections import Counter
from datetime import date

import pytest
from fastapi.testclient import TestClient

# Point the app at a throwaway SQLite file before any settings are cached.
_TMP_DIR = tempfile.mkdtemp(prefix="meeting-conflicts-tests-")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"

from meeting_conflicts.api.dependencies.services import get_meeting_repository  # noqa: E402
from meeting_conflicts.main import create_app  # noqa: E402
from meeting_conflicts.schemas.meeting import MeetingRecord  # noqa: E402
from meeting_conflicts.services.time_interval import ClockTime  # noqa: E402

DEFAULT_DATE = date(2025, 6, 2)


class FakeMeetingRepository:
    """
    In-memory stand-in for the meeting repository.

    Meetings are returned in insertion order. Setting `error` makes every
    call raise it, to simulate storage outages.
    """

    def __init__(self):
        self.meetings: dict[int, MeetingRecord] = {}
        self.calls: Counter = Counter()
        self.updates: list[tuple[int, dict]] = []
        self.error: Exception | None = None
        self._next_id = 1

    def add(
        self,
        start: str,
        end: str,
        mandatory=(),
        optional=(),
        day: date = DEFAULT_DATE,
        title: str = "Existing meeting",
        meeting_id: int | None = None,
    ) -> MeetingRecord:
        if meeting_id is None:
            meeting_id = self._next_id
        self._next_id = max(self._next_id, meeting_id) + 1

        record = MeetingRecord(
            id=meeting_id,
            title=title,
            scheduler_name="Test Scheduler",
            date=day,
            start_time=start,
            end_time=end,
            mandatory_attendees=list(mandatory),
            optional_attendees=list(optional),
        )
        self.meetings[meeting_id] = record
        return record

    def _check(self, name: str) -> None:
        self.calls[name] += 1
        if self.error is not None:
            raise self.error

    async def get_meetings_for_date(self, day):
        self._check("get_meetings_for_date")
        return [m for m in self.meetings.values() if m.date == day]

    async def get_meetings_for_dates(self, days):
        self._check("get_meetings_for_dates")
        return {
            day: [m for m in self.meetings.values() if m.date == day]
            for day in days
        }

    async def get_meeting(self, meeting_id):
        self._check("get_meeting")
        return self.meetings.get(meeting_id)

    async def update_meeting(self, meeting_id, changes, expected_version=None):
        self._check("update_meeting")
        current = self.meetings.get(meeting_id)
        if current is None:
            return None
        if expected_version is not None and current.version != expected_version:
            return None

        updated = current.model_copy(update={**changes, "version": current.version + 1})
        # model_copy does not validate; re-run validation like a real store would.
        updated = MeetingRecord.model_validate(updated.model_dump())
        self.meetings[meeting_id] = updated
        self.updates.append((meeting_id, dict(changes)))
        return updated


@pytest.fixture
def repo() -> FakeMeetingRepository:
    return FakeMeetingRepository()


@pytest.fixture
def t():
    """Shorthand for building ClockTime values in assertions."""
    return ClockTime.parse


@pytest.fixture
def client(repo) -> TestClient:
    """
    TestClient whose meeting repository is the in-memory fake.

    Uses the application factory so configuration stays test-friendly.
    """
    app = create_app()
    app.dependency_overrides[get_meeting_repository] = lambda: repo
    with TestClient(app) as test_client:
        yield test_client
