"""Tests for verification email delivery (SMTP patched out)."""

import smtplib
import unittest
from unittest.mock import patch

from factories import make_settings
from starauth.services.email import EmailService, build_verification_link, redact_email


def _smtp_settings(**overrides: object):
    values: dict[str, object] = {
        "EMAIL_ENABLED": True,
        "SMTP_HOST": "smtp.example.com",
        "SMTP_PORT": 587,
        "SMTP_USER": "mailer",
        "SMTP_PASSWORD": "smtp-password",
        "EMAIL_FROM": "no-reply@example.com",
        "FRONTEND_URL": "https://app.example.com/",
    }
    values.update(overrides)
    return make_settings(**values)


class TestHelpers(unittest.TestCase):
    def test_redact_email(self) -> None:
        self.assertEqual(redact_email("alice@example.com"), "al***@example.com")
        self.assertEqual(redact_email("not-an-email"), "redacted")

    def test_verification_link_is_url_encoded(self) -> None:
        link = build_verification_link("https://app.example.com/", "a+b/c=")
        self.assertEqual(link, "https://app.example.com/verify-email?token=a%2Bb%2Fc%3D")


class TestEmailService(unittest.TestCase):
    def test_disabled_logs_and_returns_false(self) -> None:
        service = EmailService(make_settings(EMAIL_ENABLED=False))
        self.assertFalse(service.is_configured)
        with patch("starauth.services.email.smtplib.SMTP") as smtp:
            with self.assertLogs("starauth.services.email", level="INFO") as logs:
                self.assertFalse(service.send_verification_email("alice@example.com", "tok"))
        smtp.assert_not_called()
        self.assertNotIn("alice@example.com", "\n".join(logs.output))

    def test_enabled_without_host_is_not_configured(self) -> None:
        service = EmailService(_smtp_settings(SMTP_HOST=None))
        self.assertFalse(service.is_configured)

    def test_sends_over_starttls(self) -> None:
        service = EmailService(_smtp_settings())
        with patch("starauth.services.email.smtplib.SMTP") as smtp:
            sent = service.send_verification_email("alice@example.com", "tok-123")
        self.assertTrue(sent)
        smtp.assert_called_once()
        self.assertEqual(smtp.call_args.args, ("smtp.example.com", 587))
        server = smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "smtp-password")
        from_addr, to_addrs, message = server.sendmail.call_args.args
        self.assertEqual(from_addr, "no-reply@example.com")
        self.assertEqual(to_addrs, ["alice@example.com"])
        self.assertIn("https://app.example.com/verify-email?token=tok-123", message)

    def test_implicit_tls_uses_smtp_ssl(self) -> None:
        service = EmailService(_smtp_settings(SMTP_USE_TLS=False, SMTP_PORT=465))
        with patch("starauth.services.email.smtplib.SMTP_SSL") as smtp_ssl:
            self.assertTrue(service.send_verification_email("alice@example.com", "tok"))
        smtp_ssl.assert_called_once()

    def test_smtp_errors_propagate(self) -> None:
        service = EmailService(_smtp_settings())
        with patch("starauth.services.email.smtplib.SMTP") as smtp:
            smtp.return_value.__enter__.return_value.sendmail.side_effect = smtplib.SMTPException("boom")
            with self.assertRaises(smtplib.SMTPException):
                service.send_verification_email("alice@example.com", "tok")


if __name__ == "__main__":
    unittest.main()
