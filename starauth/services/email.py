"""Outbound transactional email (verification links) over SMTP."""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING, Protocol
from urllib.parse import urlencode

if TYPE_CHECKING:
    from starauth.core.config import Settings

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your StarAuth account"


class VerificationMailer(Protocol):
    """Anything that can deliver a verification link to an address."""

    def send_verification_email(self, to_email: str, verification_token: str) -> bool: ...


def redact_email(email: str) -> str:
    """Redact an email address for logging (keeps the first two characters and the domain)."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


def build_verification_link(frontend_url: str, verification_token: str) -> str:
    return f"{frontend_url.rstrip('/')}/verify-email?{urlencode({'token': verification_token})}"


class EmailService:
    """
    SMTP sender for verification emails.

    When EMAIL_ENABLED is false or SMTP_HOST/EMAIL_FROM are missing, the email
    is logged (recipient redacted) instead of sent. SMTP errors propagate to
    the caller.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        s = self.settings
        return bool(s.EMAIL_ENABLED and s.SMTP_HOST and s.EMAIL_FROM)

    def send_verification_email(self, to_email: str, verification_token: str) -> bool:
        """Send the verification link; returns False when sending is disabled."""
        link = build_verification_link(self.settings.FRONTEND_URL, verification_token)
        hours = self.settings.VERIFICATION_TOKEN_EXPIRE_HOURS
        text_body = (
            "Welcome to StarAuth!\n\n"
            f"Open the link below to verify your email address:\n{link}\n\n"
            f"This link will expire in {hours} hours."
        )
        html_body = (
            "<h3>Welcome to StarAuth!</h3>"
            "<p>Click the link below to verify your email address:</p>"
            f"<a href='{link}'>{link}</a>"
            f"<p>This link will expire in {hours} hours.</p>"
        )
        return self._send(to_email, VERIFICATION_SUBJECT, html_body, text_body)

    def _send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        if not self.is_configured:
            logger.info(
                "Email sending disabled; skipping '%s' to %s",
                subject,
                redact_email(to_email),
            )
            return False

        s = self.settings
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{s.EMAIL_FROM_NAME} <{s.EMAIL_FROM}>"
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        context = ssl.create_default_context()
        password = s.SMTP_PASSWORD.get_secret_value() if s.SMTP_PASSWORD else None
        if s.SMTP_USE_TLS:
            with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC) as server:
                server.starttls(context=context)
                if s.SMTP_USER and password:
                    server.login(s.SMTP_USER, password)
                server.sendmail(s.EMAIL_FROM, [to_email], msg.as_string())
        else:
            with smtplib.SMTP_SSL(
                s.SMTP_HOST, s.SMTP_PORT, context=context, timeout=s.SMTP_TIMEOUT_SEC
            ) as server:
                if s.SMTP_USER and password:
                    server.login(s.SMTP_USER, password)
                server.sendmail(s.EMAIL_FROM, [to_email], msg.as_string())

        logger.info("Email '%s' sent to %s", subject, redact_email(to_email))
        return True
