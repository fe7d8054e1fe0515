# interview_notifications/models/domain/notification_domain.py
"""
Notification Domain Models
Messages built by the composer and the bookkeeping of a reminder scan.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

HOUR_MS = 60 * 60 * 1000


class NotificationVariant(str, Enum):
    SCHEDULED = "scheduled"
    REMINDER = "reminder"


@dataclass(frozen=True)
class NotificationMessage:
    """One transport call: a subject, an HTML body and every recipient."""

    subject: str
    html: str
    to: list[str]


class ReminderKey(NamedTuple):
    """Dedup key: an interview and the hour bucket of its start time."""

    interview_id: str
    hour_bucket: int

    @property
    def bucket_start_ms(self) -> int:
        return self.hour_bucket * HOUR_MS


@dataclass
class ReminderScanResult:
    """Outcome of one reminder scan."""

    total: int = 0
    sent: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def record_error(self, message: str) -> None:
        self.errors.append(message)

    def to_summary(self) -> dict[str, Any]:
        summary: dict[str, Any] = {
            "sent": self.sent,
            "total": self.total,
            "skipped": self.skipped,
        }
        if self.errors:
            summary["errors"] = list(self.errors)
        return summary
