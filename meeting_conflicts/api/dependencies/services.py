# meeting_conflicts/api/dependencies/services.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from meeting_conflicts.core.config import get_settings
from meeting_conflicts.db.session import get_db
from meeting_conflicts.services.availability import AvailabilityChecker
from meeting_conflicts.services.conflict_resolver import ConflictResolver
from meeting_conflicts.services.meeting_repository import (
    MeetingRepository,
    SqlAlchemyMeetingRepository,
)
from meeting_conflicts.services.policy import ConflictPolicy


def get_conflict_policy() -> ConflictPolicy:
    """
    Engine tuning derived from the cached application settings.
    """
    return ConflictPolicy.from_settings(get_settings())


async def get_meeting_repository(
    db: AsyncSession = Depends(get_db),
) -> MeetingRepository:
    """
    Request-scoped repository over the request's DB session.

    Tests override this dependency with an in-memory fake.
    """
    return SqlAlchemyMeetingRepository(db)


async def get_conflict_resolver(
    repository: MeetingRepository = Depends(get_meeting_repository),
    policy: ConflictPolicy = Depends(get_conflict_policy),
) -> ConflictResolver:
    return ConflictResolver(repository, policy)


async def get_availability_checker(
    repository: MeetingRepository = Depends(get_meeting_repository),
    policy: ConflictPolicy = Depends(get_conflict_policy),
) -> AvailabilityChecker:
    return AvailabilityChecker(repository, policy)
