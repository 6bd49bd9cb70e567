"""SMTP transport for outgoing plain text mail."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

from ..core.config import MailSettings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MailMessage:
    """Outgoing message.

    Attributes:
        recipient: Recipient email address
        subject: Subject line, already prefixed
        body: Plain text body
    """

    recipient: str
    subject: str
    body: str


class MailError(Exception):
    """Raised when connecting to or sending through the mail server fails."""


class MailTransport(Protocol):
    """Anything able to deliver a :class:`MailMessage`."""

    def send(self, message: MailMessage) -> None:
        """Deliver ``message``."""
        raise NotImplementedError


class SmtpTransport(MailTransport):
    """Deliver messages over SMTP.

    Connects lazily on the first send when not used as a context manager.

    Example:
        >>> with SmtpTransport(MailSettings(host="smtp.example.com")) as transport:
        ...     transport.send(MailMessage("user@example.com", "Hi", "Hello\\r\\n"))
    """

    def __init__(self, settings: MailSettings) -> None:
        self._settings = settings
        self._connection: smtplib.SMTP | None = None

    def __enter__(self) -> SmtpTransport:
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()

    def connect(self) -> None:
        """Open the SMTP connection and log in when credentials are set.

        The connection is only kept once STARTTLS and login succeed.

        Raises:
            MailError: If connection or authentication fails
        """
        settings = self._settings
        if not settings.host:
            raise MailError("SMTP host not configured")

        LOGGER.info("Connecting to SMTP server %s:%d", settings.host, settings.port)
        connection: smtplib.SMTP | None = None
        try:
            if settings.use_tls:
                connection = smtplib.SMTP(
                    settings.host, settings.port, timeout=settings.timeout_seconds
                )
                connection.starttls()
            else:
                connection = smtplib.SMTP_SSL(
                    settings.host, settings.port, timeout=settings.timeout_seconds
                )
            if settings.username and settings.password:
                connection.login(settings.username, settings.password)
                LOGGER.debug("Authenticated as %s", settings.username)
        except smtplib.SMTPAuthenticationError as exc:
            LOGGER.error("SMTP authentication failed: %s", exc)
            self._close(connection)
            raise MailError(f"SMTP authentication failed: {exc}") from exc
        except smtplib.SMTPException as exc:
            LOGGER.error("SMTP error: %s", exc)
            self._close(connection)
            raise MailError(f"SMTP error: {exc}") from exc
        except OSError as exc:
            LOGGER.error("Network error connecting to SMTP server: %s", exc)
            self._close(connection)
            raise MailError(f"Network error: {exc}") from exc
        self._connection = connection

    def disconnect(self) -> None:
        """Close the connection if open."""
        if self._connection:
            try:
                self._connection.quit()
            except smtplib.SMTPException as exc:
                LOGGER.warning("Error closing SMTP connection: %s", exc)
            finally:
                self._connection = None

    def send(self, message: MailMessage) -> None:
        """Send ``message``, connecting first if needed.

        A connection that fails while sending is dropped, so the next send
        opens a fresh one.

        Raises:
            MailError: If the server rejects the message
        """
        if self._connection is None:
            self.connect()
        connection = self._connection
        if connection is None:
            raise MailError("Not connected to SMTP server")

        try:
            refused = connection.send_message(self._build_message(message))
        except (smtplib.SMTPException, OSError) as exc:
            LOGGER.error("Failed to send mail to %s: %s", message.recipient, exc)
            self._connection = None
            self._close(connection)
            raise MailError(f"Failed to send mail: {exc}") from exc
        if refused:
            raise MailError(f"Some recipients were refused: {refused}")
        LOGGER.info("Mail sent to %s: %s", message.recipient, message.subject)

    @staticmethod
    def _close(connection: smtplib.SMTP | None) -> None:
        if connection is None:
            return
        try:
            connection.close()
        except OSError as exc:
            LOGGER.debug("Error dropping SMTP connection: %s", exc)

    def _build_message(self, message: MailMessage) -> EmailMessage:
        settings = self._settings
        sender = settings.from_address or settings.username or ""
        if settings.from_name and sender:
            sender = f"{settings.from_name} <{sender}>"

        email = EmailMessage()
        email["From"] = sender
        email["To"] = message.recipient
        email["Subject"] = message.subject
        email.set_content(message.body)
        return email


__all__ = ["MailError", "MailMessage", "MailTransport", "SmtpTransport"]
