"""Reminder window selection."""

from collections.abc import Iterable

from interview_notifications.models.domain.interview_domain import Interview

MINUTE_MS = 60 * 1000

DEFAULT_LEAD_MINUTES = 60
DEFAULT_WINDOW_MINUTES = 5


def reminder_window(
    now_ms: int,
    lead_minutes: int = DEFAULT_LEAD_MINUTES,
    window_minutes: int = DEFAULT_WINDOW_MINUTES,
) -> tuple[int, int]:
    """Inclusive [start, end] of start times that are due a reminder."""
    end = now_ms + lead_minutes * MINUTE_MS
    start = end - window_minutes * MINUTE_MS
    return start, end


def select_reminder_candidates(
    interviews: Iterable[Interview],
    now_ms: int,
    lead_minutes: int = DEFAULT_LEAD_MINUTES,
    window_minutes: int = DEFAULT_WINDOW_MINUTES,
) -> list[Interview]:
    """Interviews that have not started yet and begin inside the reminder window."""
    start, end = reminder_window(now_ms, lead_minutes, window_minutes)
    return [
        interview
        for interview in interviews
        if interview.is_upcoming() and start <= interview.start_time <= end
    ]
