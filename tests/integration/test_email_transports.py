import json
import smtplib
from unittest.mock import MagicMock, patch

import pytest

from interview_notifications.config import Settings
from interview_notifications.errors import ConfigurationError, TransportError
from interview_notifications.models.domain.notification_domain import NotificationMessage
from interview_notifications.services.notifications.transport import (
    ResendTransport,
    SmtpTransport,
    build_transport,
)

MESSAGE = NotificationMessage(
    subject="Interview Scheduled: Backend Round",
    html="<p>hi</p>",
    to=["al@example.com", "bo@example.com"],
)


@pytest.mark.asyncio
async def test_resend_send_posts_batched_payload(httpx_mock):
    httpx_mock.add_response(
        method="POST",
        url="https://api.resend.com/emails",
        json={"id": "email_1"},
    )
    transport = ResendTransport(api_key="re_test", sender="noreply@example.com")

    await transport.send(MESSAGE)
    await transport.close()

    request = httpx_mock.get_request()
    assert request.headers["Authorization"] == "Bearer re_test"
    assert json.loads(request.content) == {
        "from": "noreply@example.com",
        "to": ["al@example.com", "bo@example.com"],
        "subject": "Interview Scheduled: Backend Round",
        "html": "<p>hi</p>",
    }


@pytest.mark.asyncio
async def test_resend_error_carries_status(httpx_mock):
    httpx_mock.add_response(
        method="POST",
        url="https://api.resend.com/emails",
        status_code=422,
        json={"statusCode": 422, "name": "validation_error", "message": "Invalid `to` field"},
    )
    transport = ResendTransport(api_key="re_test", sender="noreply@example.com")

    with pytest.raises(TransportError) as exc:
        await transport.send(MESSAGE)
    await transport.close()

    assert exc.value.status_code == 422
    assert str(exc.value).startswith("Resend error: 422")


@pytest.mark.asyncio
async def test_resend_verify_accepts_sending_only_key(httpx_mock):
    httpx_mock.add_response(
        method="GET",
        url="https://api.resend.com/domains",
        status_code=401,
        json={"statusCode": 401, "name": "restricted_api_key", "message": "restricted"},
    )
    transport = ResendTransport(api_key="re_test", sender="noreply@example.com")

    await transport.verify()
    await transport.close()


@pytest.mark.asyncio
async def test_resend_verify_rejects_invalid_key(httpx_mock):
    httpx_mock.add_response(
        method="GET",
        url="https://api.resend.com/domains",
        status_code=400,
        json={"statusCode": 400, "name": "validation_error", "message": "API key is invalid"},
    )
    transport = ResendTransport(api_key="bad", sender="noreply@example.com")

    with pytest.raises(TransportError):
        await transport.verify()
    await transport.close()


def _smtp_transport(port: int = 587) -> SmtpTransport:
    return SmtpTransport(
        host="smtp.example.com",
        port=port,
        username="mailer",
        password="pw",
        sender="noreply@example.com",
    )


@pytest.mark.asyncio
async def test_smtp_send_uses_starttls_and_one_call_for_all_recipients():
    server = MagicMock()
    with patch("smtplib.SMTP", return_value=server) as smtp_cls:
        await _smtp_transport().send(MESSAGE)

    smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=30.0)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("mailer", "pw")
    server.send_message.assert_called_once()
    _, kwargs = server.send_message.call_args
    assert kwargs["to_addrs"] == ["al@example.com", "bo@example.com"]
    email = server.send_message.call_args.args[0]
    assert email["To"] == "al@example.com, bo@example.com"
    assert email["Subject"] == "Interview Scheduled: Backend Round"
    server.quit.assert_called_once()


@pytest.mark.asyncio
async def test_smtp_port_465_uses_implicit_tls():
    server = MagicMock()
    with patch("smtplib.SMTP_SSL", return_value=server) as smtp_ssl_cls:
        await _smtp_transport(port=465).verify()

    assert smtp_ssl_cls.call_count == 1
    server.starttls.assert_not_called()
    server.login.assert_called_once_with("mailer", "pw")


@pytest.mark.asyncio
async def test_smtp_auth_failure_is_transport_error():
    server = MagicMock()
    server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
    with patch("smtplib.SMTP", return_value=server):
        with pytest.raises(TransportError) as exc:
            await _smtp_transport().verify()

    assert "SMTP verification failed" in str(exc.value)


@pytest.mark.asyncio
async def test_smtp_rejected_send_carries_code():
    server = MagicMock()
    server.send_message.side_effect = smtplib.SMTPDataError(550, b"mailbox unavailable")
    with patch("smtplib.SMTP", return_value=server):
        with pytest.raises(TransportError) as exc:
            await _smtp_transport().send(MESSAGE)

    assert exc.value.status_code == 550
    server.quit.assert_called_once()


def test_build_transport_reports_missing_settings():
    settings = Settings(_env_file=None, EMAIL_PROVIDER="smtp", SMTP_HOST="smtp.example.com")

    with pytest.raises(ConfigurationError) as exc:
        build_transport(settings)

    assert exc.value.missing == ["SMTP_USER", "SMTP_PASS", "MAIL_FROM"]


def test_build_transport_selects_provider():
    resend = build_transport(
        Settings(
            _env_file=None,
            EMAIL_PROVIDER="resend",
            RESEND_API_KEY="re_test",
            MAIL_FROM="noreply@example.com",
        )
    )
    smtp = build_transport(
        Settings(
            _env_file=None,
            EMAIL_PROVIDER="smtp",
            SMTP_HOST="smtp.example.com",
            SMTP_USER="mailer",
            SMTP_PASS="pw",
            MAIL_FROM="noreply@example.com",
        )
    )

    assert isinstance(resend, ResendTransport)
    assert isinstance(smtp, SmtpTransport)
    assert smtp.secure is False
