"""Outbound Email — SMTP and console transports with fire-and-forget delivery.

Invariants:
    - send() awaits delivery and raises on failure; send_in_background() never raises
    - Background sends are at-most-once: no retry, failures are only logged
    - Background tasks are referenced until done (no silent GC of pending sends)
    - SMTP backend refuses to build without host/port/username/password (InvalidEnvError)

Design Decisions:
    - smtplib in a worker thread (asyncio.to_thread): blocking SMTP never stalls the event loop
    - Console backend logs the message: development runs need no mail server
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape

from tasklist.config import Settings
from tasklist.core.errors import InvalidEnvError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutboundEmail:
    """Email envelope: recipient, subject, plain-text and HTML bodies."""
    to: str
    subject: str
    text: str
    html: str


class Mailer:
    """Base transport. Subclasses implement _deliver()."""

    def __init__(self, sender: str):
        self.sender = sender
        self._pending: set[asyncio.Task] = set()

    async def send(self, email: OutboundEmail) -> None:
        await self._deliver(email)
        logger.info(f"Email sent: {email.subject}", extra={"recipient": email.to})

    def send_in_background(self, email: OutboundEmail) -> asyncio.Task:
        """Schedule delivery without blocking the caller."""
        task = asyncio.get_running_loop().create_task(self.send(email))
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning("Email delivery cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Email sending failed: {exc}", exc_info=exc)

    async def drain(self) -> None:
        """Wait for pending background sends (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _deliver(self, email: OutboundEmail) -> None:
        raise NotImplementedError

    def _build_message(self, email: OutboundEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = email.to
        msg["Subject"] = email.subject
        msg.set_content(email.text)
        msg.add_alternative(email.html, subtype="html")
        return msg


class SmtpMailer(Mailer):
    """STARTTLS + login SMTP transport."""

    def __init__(
        self, host: str, port: int, username: str, password: str, sender: str,
    ):
        super().__init__(sender)
        self.host = host
        self.port = port
        self.username = username
        self.password = password

    async def _deliver(self, email: OutboundEmail) -> None:
        await asyncio.to_thread(self._send_sync, self._build_message(email))

    def _send_sync(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=30) as server:
            server.starttls()
            server.login(self.username, self.password)
            server.send_message(msg)


class ConsoleMailer(Mailer):
    """Logs emails instead of sending them."""

    async def _deliver(self, email: OutboundEmail) -> None:
        logger.info(
            f"[console mail] {email.subject}\n{email.text}",
            extra={"recipient": email.to},
        )


def build_mailer(settings: Settings) -> Mailer:
    """Build the configured transport. Fails fast on incomplete SMTP config."""
    if settings.mail_backend == "console":
        return ConsoleMailer(settings.mail_sender)
    missing = [
        name for name in ("smtp_host", "smtp_port", "smtp_username", "smtp_password")
        if not getattr(settings, name)
    ]
    if missing:
        raise InvalidEnvError(
            f"SMTP credentials are missing: {', '.join(missing).upper()}",
        )
    return SmtpMailer(
        settings.smtp_host, settings.smtp_port,
        settings.smtp_username, settings.smtp_password,
        settings.mail_sender,
    )


# ─── Templates ───────────────────────────────────────────────────

def activation_email(to: str, username: str, activation_url: str) -> OutboundEmail:
    return OutboundEmail(
        to=to,
        subject="Account activation",
        text=(
            f"Hello {username},\n\n"
            "Please click on the following link to activate your account:\n\n"
            f"{activation_url}\n\n"
            "If you did not request this, please ignore this email.\n"
        ),
        html=(
            f"Hello <b>{escape(username)}</b>,<br><br>"
            "Please click on the following link to activate your account:<br><br>"
            f'<a href="{activation_url}">Activate account</a><br><br>'
            "If you did not request this, please ignore this email.<br>"
        ),
    )


def password_recovery_email(to: str, username: str, reset_token: str) -> OutboundEmail:
    return OutboundEmail(
        to=to,
        subject="Password recovery",
        text=(
            f"Hello {username},\n\n"
            "Use the following token to choose a new password. "
            "It expires in one hour:\n\n"
            f"{reset_token}\n\n"
            "If you did not request this, please ignore this email and "
            "your password will remain unchanged.\n"
        ),
        html=(
            f"Hello <b>{escape(username)}</b>,<br><br>"
            "Use the following token to choose a new password. "
            "It expires in one hour:<br><br>"
            f"<code>{reset_token}</code><br><br>"
            "If you did not request this, please ignore this email and "
            "your password will remain unchanged.<br>"
        ),
    )
