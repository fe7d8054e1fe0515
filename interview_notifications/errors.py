"""
Error taxonomy for notification delivery.

Configuration and authorization errors are fatal to a whole invocation.
Resolution and transport errors are isolated to one interview inside a
reminder scan and collected into the scan result.
"""


class NotificationError(Exception):
    """Base class for notification failures."""


class ConfigurationError(NotificationError):
    """A required credential or address is missing."""

    def __init__(self, missing: list[str], message: str | None = None):
        self.missing = list(missing)
        super().__init__(message or f"Missing configuration: {', '.join(self.missing)}")


class ResolutionError(NotificationError):
    """Participants of an interview could not be resolved in the user directory."""

    def __init__(self, message: str, interview_id: str | None = None):
        super().__init__(message)
        self.interview_id = interview_id


class TransportError(NotificationError):
    """The email provider rejected or failed a send."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class UnauthorizedError(NotificationError):
    """Missing or invalid trigger secret."""
