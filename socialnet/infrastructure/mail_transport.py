"""Mail Transport — delivers magic-link login mails (LoginMailer implementations).

Invariants:
    - The mail body carries the complete link (request id + secret), never the stored hash
    - Delivery errors propagate to the caller of send_login; the session protocol does not retry

Design Decisions:
    - LogOnlyMailer for development: prints the link to the log like a dev console
    - SmtpMailer runs the blocking smtplib client in a worker thread (asyncio.to_thread)
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from socialnet.config import Settings
from socialnet.core.boundary_protocols import LoginMail, LoginMailer

logger = logging.getLogger(__name__)

SUBJECT = "Confirm Social Login"


def render_login_body(mail: LoginMail, instance_name: str) -> str:
    return (
        f"Greetings {mail.username},\n\n"
        f"someone requested to be logged in to your account at {instance_name}.\n"
        "If this was not requested by you, don't click anything in this message.\n\n"
        "If you intended to log in, click this link to complete the process:\n"
        f"{mail.complete_link}\n\n"
        "Regards,\n"
        f"The mail robot at {instance_name}\n"
    )


class LogOnlyMailer:
    """Writes the magic link to the log instead of sending it."""

    async def send_login(self, mail: LoginMail) -> None:
        logger.info(
            f"Login link for {mail.username}: {mail.complete_link}",
            extra={"request_id": mail.request_id},
        )


class SmtpMailer:
    """Sends login mails over SMTP with STARTTLS."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _build_message(self, mail: LoginMail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr(
            (self._settings.mail_sender_name, self._settings.mail_sender),
        )
        message["To"] = formataddr((mail.username, mail.recipient))
        message["Subject"] = SUBJECT
        message.set_content(render_login_body(mail, self._settings.instance_name))
        return message

    def _deliver(self, message: EmailMessage) -> None:
        s = self._settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=30) as smtp:
            smtp.starttls()
            if s.smtp_user:
                smtp.login(s.smtp_user, s.smtp_password)
            smtp.send_message(message)

    async def send_login(self, mail: LoginMail) -> None:
        await asyncio.to_thread(self._deliver, self._build_message(mail))
        logger.info(
            "Login mail handed to SMTP relay",
            extra={"request_id": mail.request_id},
        )


def build_mailer(settings: Settings) -> LoginMailer:
    if settings.mail_transport == "smtp":
        return SmtpMailer(settings)
    if settings.mail_transport != "log":
        raise ValueError(f"Unknown mail transport '{settings.mail_transport}'")
    return LogOnlyMailer()
