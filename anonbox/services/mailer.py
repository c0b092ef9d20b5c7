"""Verification email delivery over SMTP."""

import asyncio
import smtplib
from email.mime.text import MIMEText
from urllib.parse import quote

from anonbox.core.config import get_settings
from anonbox.core.exceptions import AppError
from anonbox.core.logging import get_logger

log = get_logger(__name__)


class EmailDeliveryError(AppError):
    def __init__(self, message: str = "Failed to send verification email"):
        super().__init__(message, code="EMAIL_DELIVERY_FAILED")


def build_verification_email(email: str, username: str, verify_code: str) -> MIMEText:
    settings = get_settings()
    link = f"{settings.app_base_url.rstrip('/')}/verify/{quote(username)}"
    body = (
        f"Hello {username},\n\n"
        "Thank you for registering. Please use the following verification code to complete your registration:\n\n"
        f"    {verify_code}\n\n"
        f"The code is valid for {settings.verify_code_ttl_minutes} minutes. Enter it at {link}\n\n"
        "If you did not request this code, please ignore this email.\n"
    )
    msg = MIMEText(body, "plain", "utf-8")
    msg["Subject"] = "Anonbox | Verification Code"
    msg["From"] = settings.smtp_from
    msg["To"] = email
    return msg


def _send(msg: MIMEText) -> None:
    settings = get_settings()
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as server:
        if settings.smtp_tls:
            server.starttls()
        if settings.smtp_user and settings.smtp_password:
            server.login(settings.smtp_user, settings.smtp_password)
        server.send_message(msg)


async def send_verification_email(email: str, username: str, verify_code: str) -> None:
    """Deliver the code; raises EmailDeliveryError if the SMTP server refuses."""
    msg = build_verification_email(email, username, verify_code)
    if not get_settings().smtp_host:
        log.info("verification_email_skipped", email=email, username=username, reason="SMTP_HOST not set")
        return
    try:
        await asyncio.to_thread(_send, msg)
    except (smtplib.SMTPException, OSError) as e:
        log.exception("verification_email_failed", email=email, username=username)
        raise EmailDeliveryError() from e
    log.info("verification_email_sent", email=email, username=username)
