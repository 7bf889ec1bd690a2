"""
Outbound notifications for the password reset flow.
"""
from email.message import EmailMessage
from typing import Optional, Protocol
import logging
import smtplib
import ssl

from ..errors import NotificationError

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Your Password Reset Code"
RESET_BODY = (
    "Your 6-digit password reset code is: {code}. "
    "This code will expire in 15 minutes. "
    "Please use it immediately to reset your password."
)


class NotificationSender(Protocol):
    def send_password_reset_code(self, to_email: str, code: str) -> None: ...


def build_reset_message(from_email: str, to_email: str, code: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = RESET_SUBJECT
    msg["From"] = from_email
    msg["To"] = to_email
    msg.set_content(RESET_BODY.format(code=code))
    return msg


class SMTPSender:
    """
    Send reset codes over SMTP with STARTTLS.

    Args:
        host: SMTP server host
        port: SMTP server port (587 for STARTTLS)
        username: Login user, skipped when empty
        password: Login password or app password
        from_email: Envelope and header sender
        timeout: Socket timeout in seconds
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        from_email: str,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.timeout = timeout

    def send_password_reset_code(self, to_email: str, code: str) -> None:
        msg = build_reset_message(self.from_email, to_email, code)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls(context=ssl.create_default_context())
                if self.username:
                    server.login(self.username, self.password or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"failed to send reset code via {self.host}:{self.port}") from e

        logger.info("Password reset code sent to %s", to_email)


class LogOnlySender:
    """Dev stand-in for mail: writes the code to the log instead of sending it."""

    def send_password_reset_code(self, to_email: str, code: str) -> None:
        logger.warning("[DEV] Password reset code for %s: %s (expires in 15 minutes)", to_email, code)


class UnconfiguredSender:
    """Used outside local environments when no SMTP host is set: every delivery fails."""

    def send_password_reset_code(self, to_email: str, code: str) -> None:
        raise NotificationError("no SMTP host configured; reset code not delivered")
