# meeting_conflicts/api/routes/meetings.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from meeting_conflicts.api.dependencies.services import get_availability_checker
from meeting_conflicts.core.logging import get_logger
from meeting_conflicts.schemas.conflict import AvailabilityCheckResult, ConflictRequest
from meeting_conflicts.services.availability import AvailabilityChecker
from meeting_conflicts.services.meeting_repository import MeetingRepositoryError

logger = get_logger(__name__)

router = APIRouter(prefix="/meetings", tags=["Meetings"])


@router.post(
    "/check-conflicts",
    response_model=AvailabilityCheckResult,
    status_code=HTTPStatus.OK,
    summary="Quick availability check for a meeting form",
    description=(
        "Lightweight check used while filling in a meeting form.\n\n"
        "Returns human-readable reasons why the slot cannot be booked:\n"
        "- the slot lies outside working hours (08:00-20:00 by default)\n"
        "- mandatory attendees are already booked at an overlapping time\n"
        "- a mandatory attendee already has the daily maximum of meetings\n\n"
        "Use `/conflicts/analyze` for severities and suggestions."
    ),
    responses={
        200: {
            "description": "Check completed.",
            "content": {
                "application/json": {
                    "example": {
                        "hasConflicts": True,
                        "conflicts": [
                            'Alice already has "Brand sync" scheduled at 09:00-10:00',
                        ],
                    }
                }
            },
        },
    },
)
async def check_meeting_conflicts(
    payload: ConflictRequest,
    checker: AvailabilityChecker = Depends(get_availability_checker),
) -> AvailabilityCheckResult:
    try:
        return await checker.check(payload)
    except MeetingRepositoryError:
        logger.exception("availability_check_failed", date=payload.date.isoformat())
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail="Failed to check conflicts",
        )
