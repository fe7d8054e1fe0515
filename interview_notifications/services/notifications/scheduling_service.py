"""
Immediate "interview scheduled" notification.

Called once per interview creation, so there is no de-duplication. The
candidate email goes first and the interviewer batch second; if the second
send fails the first is not recalled, so delivery is at-least-partial rather
than atomic.
"""

from datetime import UTC, tzinfo

from interview_notifications.infrastructure.observability.logging import get_logger
from interview_notifications.models.api.notification_request import ScheduleNotificationRequest
from interview_notifications.models.domain.interview_domain import Participant
from interview_notifications.models.domain.notification_domain import NotificationVariant
from interview_notifications.services.notifications.composer import compose_messages
from interview_notifications.services.notifications.transport import EmailTransport

logger = get_logger(__name__)


async def send_scheduled_notification(
    request: ScheduleNotificationRequest,
    transport: EmailTransport,
    display_tz: tzinfo = UTC,
) -> int:
    """
    Verify the transport, then send the "scheduled" emails.

    Returns:
        int: number of transport calls made (1 or 2)

    Raises:
        TransportError: verification or a send failed
    """
    candidate = Participant(name=request.candidate.name, email=str(request.candidate.email))
    interviewers = [Participant(name=i.name, email=str(i.email)) for i in request.interviewers]

    messages = compose_messages(
        title=request.title,
        start_time=request.start_time,
        candidate=candidate,
        interviewers=interviewers,
        organizer_name=request.organizer_name,
        variant=NotificationVariant.SCHEDULED,
        tz=display_tz,
    )

    await transport.verify()

    for message in messages:
        await transport.send(message)

    logger.info(
        "Scheduled notification sent",
        title=request.title,
        interviewer_count=len(interviewers),
        messages_sent=len(messages),
    )
    return len(messages)
