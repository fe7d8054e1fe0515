"""
Reminder scan and de-duplication engine.

Each invocation selects interviews starting 55-60 minutes from now, resolves
their participants in the user directory, and sends the "reminder" emails at
most once per (interview, hour bucket) for the lifetime of the process.

Per-interview failures (participants missing, provider rejecting a send) are
recorded in the scan result and never abort the rest of the batch. Failures
before the batch starts (store unreachable, transport credentials rejected)
propagate to the caller.

The dedup cache is in-memory: a restart forgets which reminders went out, so
a scan right after a restart may send a reminder again.
"""

import time
from collections.abc import Callable
from datetime import UTC, tzinfo
from typing import Protocol

from interview_notifications.config import settings
from interview_notifications.errors import ResolutionError
from interview_notifications.infrastructure.observability.logging import get_logger
from interview_notifications.models.domain.interview_domain import (
    DirectoryUser,
    Interview,
    Participant,
)
from interview_notifications.models.domain.notification_domain import (
    NotificationVariant,
    ReminderScanResult,
)
from interview_notifications.repositories.interview_repository import get_interview_repository
from interview_notifications.repositories.user_repository import get_user_directory
from interview_notifications.services.notifications.composer import (
    compose_messages,
    resolve_timezone,
)
from interview_notifications.services.notifications.dedup import (
    ReminderDedupCache,
    reminder_key,
)
from interview_notifications.services.notifications.transport import (
    EmailTransport,
    build_transport,
)
from interview_notifications.services.notifications.window import (
    DEFAULT_LEAD_MINUTES,
    DEFAULT_WINDOW_MINUTES,
    select_reminder_candidates,
)

logger = get_logger(__name__)


class UpcomingInterviewSource(Protocol):
    async def list_upcoming_for_reminder(self, now_ms: int) -> list[Interview]: ...


class UserLookup(Protocol):
    async def users_by_id(self) -> dict[str, DirectoryUser]: ...


def now_ms() -> int:
    return int(time.time() * 1000)


def resolve_participants(
    interview: Interview, users: dict[str, DirectoryUser]
) -> tuple[Participant, list[Participant]]:
    """
    Look up the candidate and interviewers of an interview.

    Unknown interviewer ids are dropped; order of the rest is kept.

    Raises:
        ResolutionError: candidate unknown, or no interviewer resolves
    """
    candidate = users.get(interview.candidate_id)
    if candidate is None:
        raise ResolutionError(
            f"Candidate not found for interview {interview.id}", interview_id=interview.id
        )

    interviewers = [
        Participant.from_user(users[user_id])
        for user_id in interview.interviewer_ids
        if user_id in users
    ]
    if not interviewers:
        raise ResolutionError(
            f"No interviewers found for interview {interview.id}", interview_id=interview.id
        )

    return Participant.from_user(candidate), interviewers


class ReminderEngine:
    """
    Runs reminder scans against injected collaborators.

    The engine must outlive individual scans: the dedup guarantee only holds
    while the same cache instance is reused.
    """

    def __init__(
        self,
        store: UpcomingInterviewSource,
        directory: UserLookup,
        transport: EmailTransport,
        cache: ReminderDedupCache | None = None,
        clock: Callable[[], int] = now_ms,
        display_tz: tzinfo = UTC,
        lead_minutes: int = DEFAULT_LEAD_MINUTES,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
    ):
        self.store = store
        self.directory = directory
        self.transport = transport
        self.cache = cache if cache is not None else ReminderDedupCache()
        self.clock = clock
        self.display_tz = display_tz
        self.lead_minutes = lead_minutes
        self.window_minutes = window_minutes

    async def run_once(self) -> ReminderScanResult:
        now = self.clock()
        upcoming = await self.store.list_upcoming_for_reminder(now)
        candidates = select_reminder_candidates(
            upcoming, now, self.lead_minutes, self.window_minutes
        )
        result = ReminderScanResult(total=len(candidates))

        if not candidates:
            logger.info("No upcoming interviews to remind", now_ms=now)
            return result

        await self.transport.verify()
        users = await self.directory.users_by_id()

        for interview in candidates:
            await self._remind(interview, users, result)

        self.cache.maybe_evict(now)

        logger.info(
            "Reminder scan completed",
            total=result.total,
            sent=result.sent,
            skipped=result.skipped,
            error_count=len(result.errors),
        )
        return result

    async def _remind(
        self,
        interview: Interview,
        users: dict[str, DirectoryUser],
        result: ReminderScanResult,
    ) -> None:
        key = reminder_key(interview.id, interview.start_time)

        if not self.cache.try_reserve(key):
            result.skipped += 1
            logger.debug("Reminder already sent", interview_id=interview.id, hour_bucket=key.hour_bucket)
            return

        delivered = False
        try:
            candidate, interviewers = resolve_participants(interview, users)
            messages = compose_messages(
                title=interview.title,
                start_time=interview.start_time,
                candidate=candidate,
                interviewers=interviewers,
                variant=NotificationVariant.REMINDER,
                tz=self.display_tz,
            )
            for message in messages:
                await self.transport.send(message)
            delivered = True

        except ResolutionError as e:
            result.record_error(str(e))
            logger.warning("Reminder participants unresolved", interview_id=interview.id, error=str(e))
            return

        except Exception as e:
            result.record_error(f"Failed to send reminder for interview {interview.id}: {e}")
            logger.error(
                "Error sending reminder",
                interview_id=interview.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        finally:
            # Runs on cancellation too, so no key is left in flight
            if delivered:
                self.cache.mark_sent(key)
            else:
                self.cache.release(key)

        result.sent += 1
        logger.info("Reminder sent", interview_id=interview.id, messages_sent=len(messages))


# Shared across invocations so repeated triggers in one process dedup
reminder_cache = ReminderDedupCache(**settings.reminder_dedup_config())

_engine: ReminderEngine | None = None


def get_reminder_engine() -> ReminderEngine:
    """
    Process-wide engine built from settings on first use.

    Raises:
        ConfigurationError: email or store settings missing
    """
    global _engine
    if _engine is None:
        store = get_interview_repository()
        directory = get_user_directory()
        _engine = ReminderEngine(
            store=store,
            directory=directory,
            transport=build_transport(settings),
            cache=reminder_cache,
            display_tz=resolve_timezone(settings.DISPLAY_TIMEZONE),
            lead_minutes=settings.REMINDER_LEAD_MINUTES,
            window_minutes=settings.REMINDER_WINDOW_MINUTES,
        )
    return _engine


async def close_reminder_engine() -> None:
    global _engine
    if _engine is not None:
        await _engine.transport.close()
        _engine = None
