"""
In-memory reminder de-duplication.

Tracks which (interview, hour bucket) pairs already received a reminder so
that repeated scans inside the same bucket send nothing twice. The cache
lives in process memory only: a restart forgets every entry, and separate
processes do not share state.
"""

import threading

from interview_notifications.infrastructure.observability.logging import get_logger
from interview_notifications.models.domain.notification_domain import HOUR_MS, ReminderKey

logger = get_logger(__name__)

DEFAULT_MAX_ENTRIES = 1000
DEFAULT_MAX_AGE_MS = 24 * HOUR_MS


def reminder_key(interview_id: str, start_time: int) -> ReminderKey:
    """Dedup key for an interview starting at `start_time` (epoch ms)."""
    return ReminderKey(interview_id=interview_id, hour_bucket=start_time // HOUR_MS)


class ReminderDedupCache:
    """
    Thread-safe key-presence cache with a size-triggered age eviction.

    A key moves through two states: reserved (a scan is sending it right now)
    and sent. `try_reserve` is the only way in and is atomic, so two
    overlapping scans cannot both claim the same key.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        max_age_ms: int = DEFAULT_MAX_AGE_MS,
    ):
        self.max_entries = max_entries
        self.max_age_ms = max_age_ms
        self._sent: set[ReminderKey] = set()
        self._in_flight: set[ReminderKey] = set()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sent)

    def contains(self, key: ReminderKey) -> bool:
        with self._lock:
            return key in self._sent

    def try_reserve(self, key: ReminderKey) -> bool:
        """Claim `key` for sending. False if it was sent or is being sent."""
        with self._lock:
            if key in self._sent or key in self._in_flight:
                return False
            self._in_flight.add(key)
            return True

    def mark_sent(self, key: ReminderKey) -> None:
        with self._lock:
            self._in_flight.discard(key)
            self._sent.add(key)

    def release(self, key: ReminderKey) -> None:
        """Drop a reservation after a failed attempt so a later scan can retry."""
        with self._lock:
            self._in_flight.discard(key)

    def evict_stale(self, now_ms: int) -> int:
        """Remove sent entries whose bucket is older than `max_age_ms`."""
        cutoff = now_ms - self.max_age_ms
        with self._lock:
            stale = {key for key in self._sent if key.bucket_start_ms < cutoff}
            self._sent -= stale
            remaining = len(self._sent)

        if stale:
            logger.info("Evicted stale reminder entries", evicted=len(stale), remaining=remaining)
        return len(stale)

    def maybe_evict(self, now_ms: int) -> int:
        """Run `evict_stale` only once the cache has grown past `max_entries`."""
        with self._lock:
            size = len(self._sent)
        if size <= self.max_entries:
            return 0
        return self.evict_stale(now_ms)

    def clear(self) -> None:
        with self._lock:
            self._sent.clear()
            self._in_flight.clear()
