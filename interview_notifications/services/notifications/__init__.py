"""
Notification delivery.

Composer, transports, reminder dedup cache and the two send flows
(immediate "scheduled" emails and the periodic reminder scan).
"""

from .composer import compose_messages, format_when  # noqa: F401
from .dedup import ReminderDedupCache, reminder_key  # noqa: F401
from .transport import EmailTransport, ResendTransport, SmtpTransport, build_transport  # noqa: F401
