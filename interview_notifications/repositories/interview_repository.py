"""
Interview data access.

Wraps the store's interview functions so routes and the reminder engine deal
in Interview models rather than raw documents.
"""

from typing import Any

from interview_notifications.config import settings
from interview_notifications.infrastructure.observability.logging import get_logger
from interview_notifications.models.domain.interview_domain import Interview
from interview_notifications.services.infrastructure.store_client import (
    StoreClient,
    get_store_client,
)

logger = get_logger(__name__)

GET_ALL_INTERVIEWS = "interviews:getAllInterviews"
GET_MY_INTERVIEWS = "interviews:getMyInterviews"
GET_BY_STREAM_CALL_ID = "interviews:getInterviewByStreamCallId"
CREATE_INTERVIEW = "interviews:createInterview"
UPDATE_INTERVIEW_STATUS = "interviews:updateInterviewStatus"


def _to_interviews(documents: list[dict] | None) -> list[Interview]:
    return [Interview.model_validate(doc) for doc in documents or []]


class InterviewRepository:
    """Interview queries and mutations against the store."""

    def __init__(self, client: StoreClient, service_token: str | None = None):
        self.client = client
        self.service_token = service_token

    async def get_all_interviews(self, token: str) -> list[Interview]:
        return _to_interviews(await self.client.query(GET_ALL_INTERVIEWS, token=token))

    async def get_my_interviews(self, token: str) -> list[Interview]:
        """Interviews where the token's subject is the candidate."""
        return _to_interviews(await self.client.query(GET_MY_INTERVIEWS, token=token))

    async def get_by_stream_call_id(self, stream_call_id: str, token: str | None = None) -> Interview | None:
        document = await self.client.query(
            GET_BY_STREAM_CALL_ID, {"streamCallId": stream_call_id}, token=token
        )
        if not document:
            return None
        return Interview.model_validate(document)

    async def create_interview(self, fields: dict[str, Any], token: str) -> str:
        """Insert an interview and return its store id."""
        interview_id = await self.client.mutation(CREATE_INTERVIEW, fields, token=token)
        logger.info("Interview created", interview_id=interview_id, status=fields.get("status"))
        return interview_id

    async def update_interview_status(self, interview_id: str, status: str, token: str | None = None) -> None:
        """Patch the status. The store stamps endTime when status becomes completed."""
        await self.client.mutation(
            UPDATE_INTERVIEW_STATUS, {"id": interview_id, "status": status}, token=token
        )
        logger.info("Interview status updated", interview_id=interview_id, status=status)

    async def list_upcoming_for_reminder(self, now_ms: int) -> list[Interview]:
        """
        Every interview still marked upcoming, read with the service token.

        The reminder window is left to the caller so that it is applied once,
        against the caller's own `now_ms`.
        """
        documents = await self.client.query(GET_ALL_INTERVIEWS, token=self.service_token)
        interviews = [interview for interview in _to_interviews(documents) if interview.is_upcoming()]
        logger.debug("Fetched upcoming interviews", count=len(interviews), now_ms=now_ms)
        return interviews


def get_interview_repository() -> InterviewRepository:
    return InterviewRepository(get_store_client(), settings.INTERVIEW_STORE_TOKEN)
