"""
Email transports.

Two interchangeable backends behind one capability interface: a
transactional HTTP API (Resend, bearer-token authenticated) and an
authenticated SMTP relay. Both accept a composed NotificationMessage and
either deliver it in one call or raise TransportError. Neither retries.
"""

import asyncio
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage

import httpx

from interview_notifications.config import (
    EMAIL_PROVIDER_RESEND,
    EMAIL_PROVIDER_SMTP,
    Settings,
)
from interview_notifications.errors import ConfigurationError, TransportError
from interview_notifications.infrastructure.observability.logging import (
    get_logger,
    log_email_sent,
)
from interview_notifications.models.domain.notification_domain import NotificationMessage

logger = get_logger(__name__)

RESEND_REQUEST_TIMEOUT = 15  # seconds
SMTP_IMPLICIT_TLS_PORT = 465


class EmailTransport(ABC):
    """Sends composed messages from a fixed sender address."""

    provider: str = "unknown"

    def __init__(self, sender: str):
        self.sender = sender

    @abstractmethod
    async def verify(self) -> None:
        """Check credentials before the first send. Raises TransportError."""

    @abstractmethod
    async def send(self, message: NotificationMessage) -> None:
        """Deliver one message to all of its recipients in a single call."""

    async def close(self) -> None:
        return None


class ResendTransport(EmailTransport):
    """Transactional email over the Resend HTTP API."""

    provider = EMAIL_PROVIDER_RESEND

    def __init__(
        self,
        api_key: str,
        sender: str,
        base_url: str = "https://api.resend.com",
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(sender)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(RESEND_REQUEST_TIMEOUT))

    async def close(self) -> None:
        await self._client.aclose()

    def _get_auth_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def verify(self) -> None:
        """
        Confirm the API key is accepted.

        Sending-only keys cannot list domains and answer 401 with the error
        name "restricted_api_key"; that still proves the key is valid.
        """
        try:
            response = await self._client.get(
                f"{self.base_url}/domains", headers=self._get_auth_headers()
            )
        except httpx.RequestError as e:
            raise TransportError(
                f"Resend verification failed: {e}", provider=self.provider
            ) from e

        if response.is_success:
            return

        if response.status_code == 401 and _error_name(response) == "restricted_api_key":
            logger.debug("Resend key is restricted to sending, treating as verified")
            return

        raise TransportError(
            f"Resend verification failed: {response.status_code} {response.text}",
            provider=self.provider,
            status_code=response.status_code,
        )

    async def send(self, message: NotificationMessage) -> None:
        payload = {
            "from": self.sender,
            "to": list(message.to),
            "subject": message.subject,
            "html": message.html,
        }

        try:
            response = await self._client.post(
                f"{self.base_url}/emails", headers=self._get_auth_headers(), json=payload
            )
        except httpx.RequestError as e:
            raise TransportError(f"Resend error: {e}", provider=self.provider) from e

        if not response.is_success:
            logger.error(
                "Resend send failed",
                status_code=response.status_code,
                response_text=response.text[:200] if response.text else "",
            )
            raise TransportError(
                f"Resend error: {response.status_code} {response.text}",
                provider=self.provider,
                status_code=response.status_code,
            )

        log_email_sent(self.provider, message.subject, len(message.to))


def _error_name(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    return data.get("name") if isinstance(data, dict) else None


class SmtpTransport(EmailTransport):
    """Authenticated SMTP relay. Port 465 uses implicit TLS, anything else STARTTLS."""

    provider = EMAIL_PROVIDER_SMTP

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        timeout: float = 30.0,
    ):
        super().__init__(sender)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout

    @property
    def secure(self) -> bool:
        return self.port == SMTP_IMPLICIT_TLS_PORT

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.secure:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            server.starttls(context=context)
        server.login(self.username, self.password)
        return server

    def _verify_sync(self) -> None:
        server = self._connect()
        server.quit()

    def _send_sync(self, message: NotificationMessage) -> None:
        email = EmailMessage()
        email["From"] = self.sender
        email["To"] = ", ".join(message.to)
        email["Subject"] = message.subject
        email.set_content(message.html, subtype="html")

        server = self._connect()
        try:
            server.send_message(email, from_addr=self.sender, to_addrs=list(message.to))
        finally:
            server.quit()

    async def verify(self) -> None:
        try:
            await asyncio.to_thread(self._verify_sync)
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(
                f"SMTP verification failed: {e}", provider=self.provider
            ) from e

    async def send(self, message: NotificationMessage) -> None:
        try:
            await asyncio.to_thread(self._send_sync, message)
        except smtplib.SMTPResponseException as e:
            raise TransportError(
                f"SMTP error: {e.smtp_code} {e.smtp_error!r}",
                provider=self.provider,
                status_code=e.smtp_code,
            ) from e
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(f"SMTP error: {e}", provider=self.provider) from e

        log_email_sent(self.provider, message.subject, len(message.to))


def build_transport(settings: Settings) -> EmailTransport:
    """
    Construct the configured transport.

    Raises:
        ConfigurationError: if any setting the provider needs is missing
    """
    missing = settings.missing_email_settings()
    if missing:
        raise ConfigurationError(missing)

    provider = settings.EMAIL_PROVIDER.strip().lower()
    if provider == EMAIL_PROVIDER_RESEND:
        return ResendTransport(
            api_key=settings.RESEND_API_KEY,
            sender=settings.MAIL_FROM,
            base_url=settings.RESEND_API_URL,
        )

    return SmtpTransport(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASS,
        sender=settings.MAIL_FROM,
        timeout=settings.SMTP_TIMEOUT,
    )
