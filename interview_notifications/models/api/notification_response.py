# interview_notifications/models/api/notification_response.py
"""
Notification API response models.
Used by routes for output formatting.
"""

from pydantic import BaseModel, Field


class SendInterviewEmailsResponse(BaseModel):
    """Response of the on-demand trigger."""

    ok: bool = Field(True, description="All emails were handed to the provider")


class ReminderRunResponse(BaseModel):
    """Summary of one reminder scan. `errors` is omitted when empty."""

    message: str = Field(..., description="Human-readable outcome")
    sent: int = Field(..., description="Interviews whose reminders were sent")
    total: int = Field(..., description="Interviews inside the reminder window")
    skipped: int = Field(0, description="Interviews already reminded in this hour bucket")
    errors: list[str] | None = Field(None, description="Per-interview failures")
