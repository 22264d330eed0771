"""Email service — sends OTP emails via async SMTP."""

from __future__ import annotations

import logging
from email.message import EmailMessage

import aiosmtplib

from clicktales.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Sends transactional emails using the configured SMTP server."""

    async def send_otp_code(self, to_email: str, otp_code: str) -> None:
        """Send a one-time verification code.

        Parameters
        ----------
        to_email:
            Recipient email address.
        otp_code:
            The code to deliver.

        Raises ``aiosmtplib.SMTPException`` (or ``OSError`` on connection
        failure) when delivery fails.
        """
        subject = f"Your {settings.app_name} OTP Code"
        body = (
            "Dear User,\n\n"
            f"Your OTP code is: {otp_code}\n\n"
            "Please use this code to complete your verification. "
            "This code is valid for a limited time.\n\n\n"
            f"Thank you for choosing {settings.app_name}.\n\n"
            "Best regards,\n"
            f"The {settings.app_name} Team"
        )
        html = (
            "<p>Dear User,</p>"
            f"<p>Your OTP code is: <strong>{otp_code}</strong></p>"
            "<p>Please use this code to complete your verification. "
            "This code is valid for a limited time.</p><br/>"
            f"<p>Thank you for choosing {settings.app_name}.</p>"
            f"<p>Best regards,<br/>The {settings.app_name} Team</p>"
        )

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = settings.email_from
        msg["To"] = to_email
        msg.set_content(body)
        msg.add_alternative(html, subtype="html")

        logger.info("Sending OTP email to %s", to_email)

        await aiosmtplib.send(
            msg,
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username or None,
            password=settings.smtp_password or None,
            start_tls=True,
        )

        logger.info("OTP email sent to %s", to_email)
