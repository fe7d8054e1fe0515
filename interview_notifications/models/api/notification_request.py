# interview_notifications/models/api/notification_request.py
"""
Notification API request models.
Validated at the route boundary before anything reaches the composer.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ParticipantPayload(BaseModel):
    """A person to notify."""

    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    email: EmailStr = Field(..., description="Email address")


class ScheduleNotificationRequest(BaseModel):
    """Body of the on-demand "interview scheduled" trigger."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=200, description="Interview title")
    start_time: int = Field(..., alias="startTime", ge=0, description="Start time (epoch ms)")
    candidate: ParticipantPayload = Field(..., description="Interviewee")
    interviewers: list[ParticipantPayload] = Field(
        default_factory=list, description="Interviewers, notified in one batched email"
    )
    organizer_name: str = Field(
        ..., alias="organizerName", min_length=1, max_length=200, description="Who scheduled it"
    )
