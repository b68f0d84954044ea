# meeting_conflicts/api/routes/conflicts.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from meeting_conflicts.api.dependencies.services import get_conflict_resolver
from meeting_conflicts.core.logging import get_logger
from meeting_conflicts.schemas.conflict import (
    ConflictAnalysis,
    ConflictRequest,
    ResolutionOutcome,
    ResolveConflictRequest,
    ResolveConflictResponse,
)
from meeting_conflicts.services.conflict_resolver import ConflictResolver
from meeting_conflicts.services.meeting_repository import MeetingRepositoryError

logger = get_logger(__name__)

router = APIRouter(prefix="/conflicts", tags=["Conflicts"])

_FAILURE_STATUS = {
    ResolutionOutcome.MEETING_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ResolutionOutcome.UNSUPPORTED_SUGGESTION: HTTPStatus.BAD_REQUEST,
    ResolutionOutcome.INVALID_SUGGESTION: HTTPStatus.BAD_REQUEST,
    ResolutionOutcome.VERSION_CONFLICT: HTTPStatus.CONFLICT,
}


@router.post(
    "/analyze",
    response_model=ConflictAnalysis,
    response_model_exclude_none=True,
    status_code=HTTPStatus.OK,
    summary="Analyse a candidate meeting for scheduling conflicts",
    description=(
        "Check a candidate meeting (date, time window, mandatory and optional "
        "attendees) against the meetings already stored for that date.\n\n"
        "The response lists:\n"
        "- `mandatory_conflict` entries for overlapping meetings that share "
        "mandatory attendees\n"
        "- `buffer_violation` entries for shared-attendee meetings less than the "
        "configured buffer (10 minutes by default) apart\n"
        "- ranked suggestions: alternative slots, removal of conflicting optional "
        "attendees, and a shorter duration\n\n"
        "Pass `excludeMeetingId` when re-checking a meeting that is being edited. "
        "Nothing is modified by this call."
    ),
    responses={
        200: {
            "description": "Analysis computed. `hasConflicts` is false when the slot is free.",
            "content": {
                "application/json": {
                    "example": {
                        "hasConflicts": False,
                        "conflicts": [],
                        "suggestions": [],
                        "severity": "low",
                        "totalConflicts": 0,
                    }
                }
            },
        },
        422: {"description": "Malformed request, e.g. a time that is not HH:MM."},
        500: {"description": "Meeting storage unavailable."},
    },
)
async def analyze_conflicts(
    payload: ConflictRequest,
    resolver: ConflictResolver = Depends(get_conflict_resolver),
) -> ConflictAnalysis:
    """
    Run conflict detection and suggestion generation for the payload.
    """
    try:
        return await resolver.analyze(payload)
    except MeetingRepositoryError:
        logger.exception("conflict_analysis_failed", date=payload.date.isoformat())
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail="Failed to analyze conflicts",
        )


@router.post(
    "/resolve",
    response_model=ResolveConflictResponse,
    status_code=HTTPStatus.OK,
    summary="Apply a suggestion to an existing meeting",
    description=(
        "Apply one suggestion returned by `/conflicts/analyze` to a stored meeting.\n\n"
        "Supported suggestion types: `reschedule`, `remove_attendee`, "
        "`shorten_duration`. The change is not re-validated; call "
        "`/conflicts/analyze` again afterwards if needed.\n\n"
        "Pass `expectedVersion` (the meeting version you last read) to make sure "
        "a concurrent edit is not silently overwritten."
    ),
    responses={
        200: {
            "description": "Suggestion applied.",
            "content": {
                "application/json": {
                    "example": {"message": "Conflict resolved successfully"}
                }
            },
        },
        400: {"description": "Unsupported suggestion type or suggestion missing its payload."},
        404: {"description": "No meeting exists with the given id."},
        409: {"description": "The meeting changed since it was read; re-run the analysis."},
        500: {"description": "Meeting storage unavailable."},
    },
)
async def resolve_conflict(
    payload: ResolveConflictRequest,
    resolver: ConflictResolver = Depends(get_conflict_resolver),
) -> ResolveConflictResponse:
    """
    Dispatch the chosen suggestion to the resolver and map its outcome to HTTP.
    """
    if payload.suggestion_id != payload.suggestion.suggestion_id:
        logger.warning(
            "suggestion_id_mismatch",
            suggestion_id=payload.suggestion_id,
            embedded_suggestion_id=payload.suggestion.suggestion_id,
        )

    try:
        outcome = await resolver.resolve(
            payload.meeting_id,
            payload.suggestion,
            expected_version=payload.expected_version,
        )
    except MeetingRepositoryError:
        logger.exception("conflict_resolution_failed", meeting_id=payload.meeting_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail="Failed to resolve conflict",
        )

    if outcome.succeeded:
        return ResolveConflictResponse(message="Conflict resolved successfully")

    if outcome is ResolutionOutcome.MEETING_NOT_FOUND:
        detail = f"Meeting with id {payload.meeting_id} not found."
    elif outcome is ResolutionOutcome.VERSION_CONFLICT:
        detail = (
            f"Meeting with id {payload.meeting_id} was modified concurrently; "
            "re-run the conflict analysis."
        )
    elif outcome is ResolutionOutcome.UNSUPPORTED_SUGGESTION:
        detail = f"Suggestion type '{payload.suggestion.type.value}' cannot be applied."
    else:
        detail = f"Suggestion '{payload.suggestion_id}' is missing data required to apply it."

    raise HTTPException(status_code=_FAILURE_STATUS[outcome], detail=detail)
