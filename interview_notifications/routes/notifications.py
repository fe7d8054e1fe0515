"""
Notification trigger routes.

- POST /api/send-interview-emails: fired by the client right after an
  interview is created; sends the "scheduled" emails immediately.
- GET  /api/cron/reminder-emails: fired by a periodic caller; runs one
  reminder scan and returns its summary.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from interview_notifications.auth.verify import cron_auth_dependency
from interview_notifications.config import settings
from interview_notifications.errors import ConfigurationError
from interview_notifications.infrastructure.observability.logging import get_logger
from interview_notifications.models.api.notification_request import ScheduleNotificationRequest
from interview_notifications.models.api.notification_response import (
    ReminderRunResponse,
    SendInterviewEmailsResponse,
)
from interview_notifications.services.notifications.composer import resolve_timezone
from interview_notifications.services.notifications.reminder_service import (
    ReminderEngine,
    get_reminder_engine,
)
from interview_notifications.services.notifications.scheduling_service import (
    send_scheduled_notification,
)
from interview_notifications.services.notifications.transport import (
    EmailTransport,
    build_transport,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["notifications"])


def get_email_transport() -> EmailTransport:
    return build_transport(settings)


@router.post("/send-interview-emails", response_model=SendInterviewEmailsResponse)
async def send_interview_emails(request: ScheduleNotificationRequest):
    """Send the "interview scheduled" emails to the candidate and interviewers."""
    transport: EmailTransport | None = None
    try:
        transport = get_email_transport()
        await send_scheduled_notification(
            request, transport, resolve_timezone(settings.DISPLAY_TIMEZONE)
        )
        return SendInterviewEmailsResponse(ok=True)

    except ConfigurationError as e:
        logger.error("Email transport not configured", missing=e.missing)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "missing_env", "details": e.missing},
        )
    except Exception as e:
        logger.error("/api/send-interview-emails error", error=str(e), error_type=type(e).__name__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "failed_to_send", "message": str(e)},
        )
    finally:
        if transport is not None:
            await transport.close()


@router.get(
    "/cron/reminder-emails",
    response_model=ReminderRunResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(cron_auth_dependency)],
)
async def run_reminder_emails():
    """Run one reminder scan. Per-interview failures are reported, not raised."""
    try:
        engine: ReminderEngine = get_reminder_engine()
    except ConfigurationError as e:
        logger.error("Reminder engine not configured", missing=e.missing)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "missing_env", "details": e.missing},
        )

    try:
        result = await engine.run_once()
    except Exception as e:
        logger.error("/api/cron/reminder-emails error", error=str(e), error_type=type(e).__name__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "failed_to_process", "message": str(e)},
        )

    message = "Reminder emails processed" if result.total else "No upcoming interviews to remind"
    return ReminderRunResponse(message=message, **result.to_summary())
