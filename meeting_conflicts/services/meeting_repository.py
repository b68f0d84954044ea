# meeting_conflicts/services/meeting_repository.py
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date as date_type
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from meeting_conflicts.core.logging import get_logger
from meeting_conflicts.models.meeting import Meeting
from meeting_conflicts.schemas.meeting import MeetingRecord

logger = get_logger(__name__)

# Fields a suggestion is allowed to change on a stored meeting.
UPDATABLE_FIELDS = frozenset(
    {"date", "start_time", "end_time", "mandatory_attendees", "optional_attendees"}
)


class MeetingRepositoryError(RuntimeError):
    """
    Raised when the underlying meeting storage cannot be read or written.
    """


class MeetingRepository(Protocol):
    """
    Storage interface consumed by the conflict engine.

    Meetings are returned ordered by start time within a date.
    """

    async def get_meetings_for_date(self, day: date_type) -> list[MeetingRecord]: ...

    async def get_meetings_for_dates(
        self, days: Iterable[date_type]
    ) -> dict[date_type, list[MeetingRecord]]: ...

    async def get_meeting(self, meeting_id: int) -> MeetingRecord | None: ...

    async def update_meeting(
        self,
        meeting_id: int,
        changes: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> MeetingRecord | None: ...


class SqlAlchemyMeetingRepository:
    """
    MeetingRepository backed by the `meetings` table through an AsyncSession.

    Updates are a compare-and-set on `version`: the row is only written when
    its version still matches, and the version is bumped on every write.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_meetings_for_date(self, day: date_type) -> list[MeetingRecord]:
        grouped = await self.get_meetings_for_dates([day])
        return grouped[day]

    async def get_meetings_for_dates(
        self, days: Iterable[date_type]
    ) -> dict[date_type, list[MeetingRecord]]:
        wanted = list(dict.fromkeys(days))
        grouped: dict[date_type, list[MeetingRecord]] = {day: [] for day in wanted}
        if not wanted:
            return grouped

        stmt = (
            select(Meeting)
            .where(Meeting.date.in_(wanted))
            .order_by(Meeting.date.asc(), Meeting.start_time.asc(), Meeting.id.asc())
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise MeetingRepositoryError(f"Failed to load meetings for {wanted}: {exc}") from exc

        for row in result.scalars().all():
            grouped[row.date].append(_to_record(row))
        return grouped

    async def get_meeting(self, meeting_id: int) -> MeetingRecord | None:
        return await self._load(meeting_id)

    async def update_meeting(
        self,
        meeting_id: int,
        changes: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> MeetingRecord | None:
        """
        Apply a partial update.

        Returns the updated meeting, or None if the meeting does not exist or
        its version no longer equals `expected_version`.

        A rejected write ends the transaction without touching anything else
        loaded in the session. A successful write refreshes only the updated
        row. A storage error rolls the session back, which expires every
        instance it holds.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update meeting fields: {sorted(unknown)}")

        values = {
            key: str(value) if key in ("start_time", "end_time") else value
            for key, value in changes.items()
        }

        conditions = [Meeting.id == meeting_id]
        if expected_version is not None:
            conditions.append(Meeting.version == expected_version)

        stmt = (
            update(Meeting)
            .where(*conditions)
            .values(**values, version=Meeting.version + 1)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.session.execute(stmt)
            written = result.rowcount
            # A zero-row UPDATE wrote nothing; committing just closes the transaction.
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise MeetingRepositoryError(f"Failed to update meeting {meeting_id}: {exc}") from exc

        if written != 1:
            logger.info(
                "meeting_update_skipped",
                meeting_id=meeting_id,
                expected_version=expected_version,
            )
            return None

        return await self._load(meeting_id, refresh=True)

    async def _load(self, meeting_id: int, refresh: bool = False) -> MeetingRecord | None:
        stmt = select(Meeting).where(Meeting.id == meeting_id)
        if refresh:
            # The identity map still holds the pre-update row.
            stmt = stmt.execution_options(populate_existing=True)

        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise MeetingRepositoryError(f"Failed to load meeting {meeting_id}: {exc}") from exc

        row = result.scalar_one_or_none()
        if row is None:
            return None
        return _to_record(row)


def _to_record(row: Meeting) -> MeetingRecord:
    try:
        return MeetingRecord.model_validate(row)
    except ValidationError as exc:
        raise MeetingRepositoryError(f"Stored meeting {row.id} is malformed: {exc}") from exc
