"""Format and send site notification mails."""

from __future__ import annotations

import html
import logging
from collections.abc import Iterable

from ..core.config import SiteSettings
from .transport import MailMessage, MailTransport

LOGGER = logging.getLogger(__name__)


class Mailer:
    """Send plain text mails whose subject carries the site name."""

    def __init__(self, transport: MailTransport, site_name: str) -> None:
        self._transport = transport
        # Site names may be stored HTML-escaped; mail is plain text.
        self.site_name = html.unescape(site_name)

    @classmethod
    def from_settings(cls, transport: MailTransport, settings: SiteSettings) -> Mailer:
        return cls(transport, settings.name)

    def compose(
        self,
        recipient: str,
        subject: str,
        lines: Iterable[str],
        footer: Iterable[str] = (),
    ) -> MailMessage:
        """Build the message without sending it. Every line ends with CRLF."""
        body = "".join(f"{line}\r\n" for line in [*lines, *footer])
        return MailMessage(
            recipient=recipient,
            subject=f"[{self.site_name}] {subject}",
            body=body,
        )

    def send_mail(
        self,
        recipient: str,
        subject: str,
        lines: Iterable[str],
        footer: Iterable[str] = (),
    ) -> MailMessage:
        """Compose and send a mail, returning the message that was sent."""
        message = self.compose(recipient, subject, lines, footer)
        LOGGER.debug("Sending '%s' to %s", message.subject, recipient)
        self._transport.send(message)
        return message


__all__ = ["Mailer"]
