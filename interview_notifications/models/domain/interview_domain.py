# interview_notifications/models/domain/interview_domain.py
"""
Interview Domain Models
Records owned by the interview store and the user directory.
Field aliases follow the store's camelCase document format.
"""

from pydantic import BaseModel, ConfigDict, Field


class InterviewStatus:
    """Known interview status values. The store accepts any string."""

    UPCOMING = "upcoming"
    COMPLETED = "completed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Interview(BaseModel):
    """Interview document as returned by the store."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id")
    title: str
    description: str | None = None
    start_time: int = Field(..., alias="startTime")
    status: str
    stream_call_id: str = Field(..., alias="streamCallId")
    candidate_id: str = Field(..., alias="candidateId")
    interviewer_ids: list[str] = Field(default_factory=list, alias="interviewerIds")
    end_time: int | None = Field(default=None, alias="endTime")

    def is_upcoming(self) -> bool:
        return self.status == InterviewStatus.UPCOMING


class DirectoryUser(BaseModel):
    """User record keyed by the identity provider's subject id."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    external_id: str = Field(..., alias="clerkId")
    name: str
    email: str
    image: str | None = None
    role: str | None = None


class Participant(BaseModel):
    """Name and address of someone who receives a notification."""

    name: str
    email: str

    @classmethod
    def from_user(cls, user: DirectoryUser) -> "Participant":
        return cls(name=user.name, email=user.email)
