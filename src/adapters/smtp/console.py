"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification emails to stdout for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints the message, link included, to stdout.
    """

    async def send(self, recipient: str, subject: str, body: str) -> None:
        """
        Log the email to console (simulates email delivery).

        The message is logged at INFO level to be visible in server logs,
        so the verification link can be copied from there.

        Args:
            recipient: Recipient email address (normalized by domain layer)
            subject: Subject line
            body: HTML body
        """
        logger.info("[EMAIL] To: %s Subject: %s Body: %s", recipient, subject, body)
