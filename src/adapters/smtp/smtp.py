"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers HTML mail through an SMTP relay with smtplib. The blocking
session runs in a worker thread so the event loop keeps serving
other requests while the relay answers.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from src.domain.exceptions import SendError

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Opens one SMTP session per message.
    """

    def __init__(
        self,
        host: str,
        port: int,
        from_addr: str,
        username: str | None = None,
        password: str | None = None,
        starttls: bool = True,
        timeout: float | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._from_addr = from_addr
        self._username = username
        self._password = password
        self._starttls = starttls
        self._timeout = timeout

    async def send(self, recipient: str, subject: str, body: str) -> None:
        """
        Send an HTML email.

        Raises:
            SendError: If the SMTP session fails at any step
        """
        message = self._build_message(recipient, subject, body)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "SMTP delivery to %s via %s:%s failed: %s", recipient, self._host, self._port, e
            )
            raise SendError(recipient) from e

    def _build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._from_addr
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(body, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        if self._timeout is None:
            server = smtplib.SMTP(self._host, self._port)
        else:
            server = smtplib.SMTP(self._host, self._port, timeout=self._timeout)
        with server:
            if self._starttls:
                server.starttls()
            if self._username:
                server.login(self._username, self._password or "")
            server.send_message(message)
