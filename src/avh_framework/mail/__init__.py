"""Outgoing mail."""

from .mailer import Mailer
from .transport import MailError, MailMessage, MailTransport, SmtpTransport

__all__ = ["MailError", "MailMessage", "MailTransport", "Mailer", "SmtpTransport"]
