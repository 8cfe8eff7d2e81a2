"""
Authentication utility functions for outbound email.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from ..config import Settings

# Set up logging
logger = logging.getLogger(__name__)


class MailSender:
    """
    Sends HTML email through fastapi-mail using the SMTP settings.

    The connection config is built on first send so that constructing the
    sender never fails on incomplete mail settings.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._mail: Optional[FastMail] = None

    def _client(self) -> FastMail:
        if self._mail is None:
            conf = ConnectionConfig(
                MAIL_USERNAME=self.settings.mail_username,
                MAIL_PASSWORD=self.settings.mail_password,
                MAIL_FROM=self.settings.mail_from,
                MAIL_PORT=self.settings.mail_port,
                MAIL_SERVER=self.settings.mail_server,
                MAIL_STARTTLS=self.settings.mail_starttls,
                MAIL_SSL_TLS=self.settings.mail_ssl_tls,
                USE_CREDENTIALS=self.settings.use_credentials,
                VALIDATE_CERTS=self.settings.validate_certs,
            )
            self._mail = FastMail(conf)
        return self._mail

    async def send(self, recipients: List[str], subject: str, html_body: str) -> None:
        message = MessageSchema(
            subject=subject,
            recipients=recipients,
            body=html_body,
            subtype=MessageType.html,
        )
        await self._client().send_message(message)


async def send_password_reset_email(
    mail_sender: MailSender,
    email: str,
    first_name: Optional[str],
    reset_url: str,
    expires_at: datetime,
) -> None:
    """
    Send the password reset link.

    Runs as a background task after the reset token is committed. Failures
    are logged and not raised; the stored token stays valid either way.

    Args:
        mail_sender: Sender to deliver through
        email: User's email address
        first_name: User's first name for the greeting, if known
        reset_url: Complete reset URL with token
        expires_at: When the reset token expires
    """
    greeting = f"Hello {first_name}," if first_name else "Hello,"
    expiry = expires_at.strftime("%B %d, %Y at %I:%M %p UTC")

    html_content = f"""
    <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6;">
            <p>{greeting}</p>
            <p>We received a request to reset the password for your patient portal account.</p>
            <p><a href="{reset_url}">Reset your password</a></p>
            <p>This link expires on {expiry}.</p>
            <p>If you can't click the link, copy and paste this address into your browser:</p>
            <p style="word-break: break-all;">{reset_url}</p>
            <p>If you did not request a password reset, you can ignore this email.</p>
        </body>
    </html>
    """

    try:
        await mail_sender.send([email], "Your Password Reset Token", html_content)
        logger.info(f"Password reset email sent to {email}")
    except Exception as e:
        logger.error(f"Failed to send password reset email to {email}: {str(e)}")
