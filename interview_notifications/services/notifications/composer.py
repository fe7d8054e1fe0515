"""
Notification composer.

Builds the candidate-facing and interviewer-facing emails for both the
"scheduled" and the "reminder" variants. Every transport sends what this
module returns, so the templates live in exactly one place.
"""

from collections.abc import Sequence
from datetime import UTC, datetime, tzinfo
from html import escape
from zoneinfo import ZoneInfo

from interview_notifications.models.domain.interview_domain import Participant
from interview_notifications.models.domain.notification_domain import (
    NotificationMessage,
    NotificationVariant,
)

# Short weekday, abbreviated month, two-digit day, numeric year, 12-hour clock
WHEN_FORMAT = "%a, %b %d, %Y, %I:%M %p"


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the display timezone; UTC when unset."""
    if not name or name.upper() == "UTC":
        return UTC
    return ZoneInfo(name)


def format_when(start_time: int, tz: tzinfo = UTC) -> str:
    """
    Render an epoch-millisecond start time for humans.

    >>> format_when(1792420200000)
    'Mon, Oct 19, 2026, 02:30 PM'
    """
    when = datetime.fromtimestamp(start_time / 1000, tz=tz)
    return when.strftime(WHEN_FORMAT)


def _detail_list(items: list[tuple[str, str]]) -> str:
    rows = "\n".join(
        f"          <li><strong>{label}:</strong> {escape(value)}</li>" for label, value in items
    )
    return f"        <ul>\n{rows}\n        </ul>"


def _candidate_html(
    variant: NotificationVariant,
    title: str,
    when: str,
    candidate: Participant,
    interviewer_names: str,
    organizer_name: str,
) -> str:
    details = [
        ("Title", title),
        ("Date &amp; Time", when),
        ("Interviewer(s)", interviewer_names),
    ]

    if variant is NotificationVariant.REMINDER:
        intro = (
            "<p><strong>This is a reminder:</strong> "
            "Your interview is scheduled to start in 1 hour.</p>"
        )
        outro = "\n        <p>Please make sure you're ready to join on time.</p>"
    else:
        intro = "<p>Your interview has been scheduled.</p>"
        outro = ""
        details.append(("Scheduled by", organizer_name))

    return (
        "      <div>\n"
        f"        <p>Hi {escape(candidate.name)},</p>\n"
        f"        {intro}\n"
        f"{_detail_list(details)}{outro}\n"
        "      </div>\n"
    )


def _interviewer_html(
    variant: NotificationVariant,
    title: str,
    when: str,
    candidate: Participant,
    organizer_name: str,
) -> str:
    details = [
        ("Title", title),
        ("Date &amp; Time", when),
        ("Candidate", candidate.name),
    ]

    if variant is NotificationVariant.REMINDER:
        intro = (
            "<p><strong>This is a reminder:</strong> "
            "You have an interview scheduled to start in 1 hour.</p>"
        )
        outro = "\n        <p>Please make sure you're ready to conduct the interview.</p>"
    else:
        intro = "<p>You have been assigned to conduct an interview.</p>"
        outro = ""
        details.append(("Scheduled by", organizer_name))

    return (
        "      <div>\n"
        "        <p>Hello,</p>\n"
        f"        {intro}\n"
        f"{_detail_list(details)}{outro}\n"
        "      </div>\n"
    )


def build_subject(variant: NotificationVariant, title: str, when: str) -> str:
    if variant is NotificationVariant.REMINDER:
        return f'Reminder: Interview "{title}" starts in 1 hour'
    return f"Interview Scheduled: {title} on {when}"


def compose_messages(
    title: str,
    start_time: int,
    candidate: Participant,
    interviewers: Sequence[Participant],
    organizer_name: str | None = None,
    variant: NotificationVariant = NotificationVariant.SCHEDULED,
    tz: tzinfo = UTC,
) -> list[NotificationMessage]:
    """
    Build the messages for one interview.

    Returns the candidate message first. The interviewer message follows only
    when there is at least one interviewer, and it carries every interviewer
    address in a single recipient list.
    """
    variant = NotificationVariant(variant)
    when = format_when(start_time, tz)
    interviewer_names = ", ".join(i.name for i in interviewers)
    subject = build_subject(variant, title, when)
    organizer = organizer_name or ""

    messages = [
        NotificationMessage(
            subject=subject,
            html=_candidate_html(variant, title, when, candidate, interviewer_names, organizer),
            to=[candidate.email],
        )
    ]

    interviewer_emails = [i.email for i in interviewers]
    if interviewer_emails:
        messages.append(
            NotificationMessage(
                subject=subject,
                html=_interviewer_html(variant, title, when, candidate, organizer),
                to=interviewer_emails,
            )
        )

    return messages
