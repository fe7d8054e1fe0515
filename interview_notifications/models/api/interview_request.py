# interview_notifications/models/api/interview_request.py
"""
Interview API request models.
Used by routes for input validation.
"""

from pydantic import BaseModel, ConfigDict, Field

from interview_notifications.models.domain.interview_domain import InterviewStatus


class CreateInterviewRequest(BaseModel):
    """Request for creating an interview record."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=200, description="Interview title")
    description: str | None = Field(default=None, max_length=2000, description="Details")
    start_time: int = Field(..., alias="startTime", ge=0, description="Start time (epoch ms)")
    status: str = Field(default=InterviewStatus.UPCOMING, min_length=1, description="Status")
    stream_call_id: str = Field(..., alias="streamCallId", min_length=1, description="Call id")
    candidate_id: str = Field(..., alias="candidateId", min_length=1, description="Candidate")
    interviewer_ids: list[str] = Field(
        default_factory=list, alias="interviewerIds", description="Interviewer identity ids"
    )

    def to_store_args(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class UpdateInterviewStatusRequest(BaseModel):
    """Request for changing an interview's status."""

    status: str = Field(..., min_length=1, max_length=50, description="New status")
