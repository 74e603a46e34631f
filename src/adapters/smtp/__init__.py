"""SMTP adapters - Email delivery implementations."""

from .console import ConsoleEmailSender
from .smtp import SmtpEmailSender

__all__ = ["ConsoleEmailSender", "SmtpEmailSender"]
