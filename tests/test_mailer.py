"""Tests for mail composition and SMTP delivery."""

from __future__ import annotations

import smtplib
from unittest.mock import MagicMock

import pytest

from avh_framework.core.config import MailSettings, SiteSettings
from avh_framework.mail import MailError, Mailer, MailMessage, SmtpTransport


class RecordingTransport:
    """Transport stub capturing sent messages."""

    def __init__(self) -> None:
        self.sent: list[MailMessage] = []

    def send(self, message: MailMessage) -> None:
        self.sent.append(message)


def test_send_mail_prefixes_subject_and_joins_lines() -> None:
    """The subject is prefixed and lines end with CRLF."""

    transport = RecordingTransport()
    mailer = Mailer(transport, "Tom &amp; Jerry&#039;s Blog")

    message = mailer.send_mail(
        "admin@example.com",
        "New comment",
        ["A comment was posted.", "Author: Ann"],
        footer=["--", "Sent by AVH"],
    )

    assert transport.sent == [message]
    assert message.recipient == "admin@example.com"
    assert message.subject == "[Tom & Jerry's Blog] New comment"
    assert message.body == (
        "A comment was posted.\r\nAuthor: Ann\r\n--\r\nSent by AVH\r\n"
    )


def test_compose_without_lines_gives_empty_body() -> None:
    """No lines means an empty body."""

    mailer = Mailer.from_settings(RecordingTransport(), SiteSettings(name="Site"))

    message = mailer.compose("a@example.com", "Ping", [])

    assert message.subject == "[Site] Ping"
    assert message.body == ""


def test_smtp_transport_requires_host() -> None:
    """Connecting without a host raises MailError."""

    with pytest.raises(MailError):
        SmtpTransport(MailSettings()).connect()


def test_smtp_transport_sends_over_starttls(monkeypatch: pytest.MonkeyPatch) -> None:
    """STARTTLS, login and headers are used when sending."""

    connection = MagicMock()
    connection.send_message.return_value = {}
    smtp_factory = MagicMock(return_value=connection)
    monkeypatch.setattr(smtplib, "SMTP", smtp_factory)
    settings = MailSettings(
        host="smtp.example.com",
        username="bot@example.com",
        password="pw",
        from_name="AVH",
    )

    with SmtpTransport(settings) as transport:
        transport.send(MailMessage("user@example.com", "[Site] Hi", "Hello\r\n"))

    smtp_factory.assert_called_once_with("smtp.example.com", 587, timeout=30)
    connection.starttls.assert_called_once()
    connection.login.assert_called_once_with("bot@example.com", "pw")
    sent = connection.send_message.call_args.args[0]
    assert sent["From"] == "AVH <bot@example.com>"
    assert sent["To"] == "user@example.com"
    assert sent["Subject"] == "[Site] Hi"
    connection.quit.assert_called_once()


def test_smtp_transport_connects_lazily_and_wraps_errors(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Send connects on demand and wraps SMTP errors."""

    connection = MagicMock()
    connection.send_message.side_effect = smtplib.SMTPDataError(554, b"rejected")
    ssl_factory = MagicMock(return_value=connection)
    monkeypatch.setattr(smtplib, "SMTP_SSL", ssl_factory)
    transport = SmtpTransport(
        MailSettings(host="smtp.example.com", port=465, use_tls=False)
    )

    with pytest.raises(MailError):
        transport.send(MailMessage("user@example.com", "Hi", "Hello\r\n"))

    ssl_factory.assert_called_once_with("smtp.example.com", 465, timeout=30)
    connection.login.assert_not_called()


def test_smtp_transport_reports_refused_recipients(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Refused recipients raise MailError."""

    connection = MagicMock()
    connection.send_message.return_value = {"user@example.com": (550, b"no")}
    monkeypatch.setattr(smtplib, "SMTP", MagicMock(return_value=connection))
    transport = SmtpTransport(MailSettings(host="smtp.example.com"))

    with pytest.raises(MailError):
        transport.send(MailMessage("user@example.com", "Hi", "Hello\r\n"))


def test_failed_starttls_does_not_keep_connection(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A send after a failed STARTTLS reconnects instead of sending in clear."""

    broken = MagicMock()
    broken.starttls.side_effect = smtplib.SMTPNotSupportedError("no STARTTLS")
    secured = MagicMock()
    secured.send_message.return_value = {}
    smtp_factory = MagicMock(side_effect=[broken, secured])
    monkeypatch.setattr(smtplib, "SMTP", smtp_factory)
    transport = SmtpTransport(
        MailSettings(host="smtp.example.com", username="bot", password="pw")
    )
    message = MailMessage("user@example.com", "Hi", "Hello\r\n")

    with pytest.raises(MailError):
        transport.send(message)
    transport.send(message)

    assert smtp_factory.call_count == 2
    broken.close.assert_called_once()
    broken.login.assert_not_called()
    broken.send_message.assert_not_called()
    secured.starttls.assert_called_once()
    secured.login.assert_called_once_with("bot", "pw")
    secured.send_message.assert_called_once()


def test_failed_login_does_not_keep_connection(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Authentication failures leave the transport disconnected."""

    connection = MagicMock()
    connection.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad")
    monkeypatch.setattr(smtplib, "SMTP", MagicMock(return_value=connection))
    transport = SmtpTransport(
        MailSettings(host="smtp.example.com", username="bot", password="pw")
    )

    with pytest.raises(MailError):
        transport.send(MailMessage("user@example.com", "Hi", "Hello\r\n"))
    with pytest.raises(MailError):
        transport.send(MailMessage("user@example.com", "Hi", "Hello\r\n"))

    assert connection.login.call_count == 2
    connection.send_message.assert_not_called()


def test_dropped_connection_is_reopened_on_next_send(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A connection that fails mid-send is discarded and replaced."""

    stale = MagicMock()
    stale.send_message.side_effect = smtplib.SMTPServerDisconnected("idle timeout")
    fresh = MagicMock()
    fresh.send_message.return_value = {}
    smtp_factory = MagicMock(side_effect=[stale, fresh])
    monkeypatch.setattr(smtplib, "SMTP", smtp_factory)
    transport = SmtpTransport(MailSettings(host="smtp.example.com"))
    message = MailMessage("user@example.com", "Hi", "Hello\r\n")

    with pytest.raises(MailError):
        transport.send(message)
    transport.send(message)

    assert smtp_factory.call_count == 2
    stale.close.assert_called_once()
    fresh.send_message.assert_called_once()


def test_send_without_connection_raises_mail_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """send reports a missing connection as MailError."""

    transport = SmtpTransport(MailSettings(host="smtp.example.com"))
    monkeypatch.setattr(transport, "connect", lambda: None)

    with pytest.raises(MailError, match="Not connected"):
        transport.send(MailMessage("user@example.com", "Hi", "Hello\r\n"))
