"""
Interview API Routes
HTTP endpoints for interview records. Every call is made against the store
with the caller's own token, so the store's authorization rules apply.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from interview_notifications.auth.verify import AuthContext, auth_dependency
from interview_notifications.infrastructure.observability.logging import get_logger
from interview_notifications.models.api.interview_request import (
    CreateInterviewRequest,
    UpdateInterviewStatusRequest,
)
from interview_notifications.models.domain.interview_domain import Interview
from interview_notifications.repositories.interview_repository import (
    InterviewRepository,
    get_interview_repository,
)
from interview_notifications.services.infrastructure.store_client import InterviewStoreError

logger = get_logger(__name__)

router = APIRouter(prefix="/interviews", tags=["interviews"])


def _store_failure(operation: str, e: InterviewStoreError) -> HTTPException:
    logger.error(f"Interview store {operation} failed", error=str(e), status_code=e.status_code)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("", response_model=list[Interview], response_model_by_alias=True)
async def list_interviews(
    auth: AuthContext = Depends(auth_dependency),
    repository: InterviewRepository = Depends(get_interview_repository),
):
    """All interviews visible to the caller."""
    try:
        return await repository.get_all_interviews(auth.token)
    except InterviewStoreError as e:
        raise _store_failure("list", e) from e


@router.get("/mine", response_model=list[Interview], response_model_by_alias=True)
async def list_my_interviews(
    auth: AuthContext = Depends(auth_dependency),
    repository: InterviewRepository = Depends(get_interview_repository),
):
    """Interviews where the caller is the candidate."""
    try:
        return await repository.get_my_interviews(auth.token)
    except InterviewStoreError as e:
        raise _store_failure("list_mine", e) from e


@router.get("/by-call/{stream_call_id}", response_model=Interview, response_model_by_alias=True)
async def get_interview_by_call(
    stream_call_id: str,
    auth: AuthContext = Depends(auth_dependency),
    repository: InterviewRepository = Depends(get_interview_repository),
):
    try:
        interview = await repository.get_by_stream_call_id(stream_call_id, auth.token)
    except InterviewStoreError as e:
        raise _store_failure("get_by_call", e) from e

    if interview is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Interview not found")
    return interview


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_interview(
    request: CreateInterviewRequest,
    auth: AuthContext = Depends(auth_dependency),
    repository: InterviewRepository = Depends(get_interview_repository),
):
    """Create an interview. The caller then fires the scheduling emails separately."""
    try:
        interview_id = await repository.create_interview(request.to_store_args(), auth.token)
    except InterviewStoreError as e:
        raise _store_failure("create", e) from e

    return {"id": interview_id}


@router.patch("/{interview_id}/status")
async def update_interview_status(
    interview_id: str,
    request: UpdateInterviewStatusRequest,
    auth: AuthContext = Depends(auth_dependency),
    repository: InterviewRepository = Depends(get_interview_repository),
):
    try:
        await repository.update_interview_status(interview_id, request.status, auth.token)
    except InterviewStoreError as e:
        raise _store_failure("update_status", e) from e

    return {"id": interview_id, "status": request.status}
