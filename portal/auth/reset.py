"""
Password reset token issuance and redemption.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from urllib.parse import urlencode

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import Settings
from ..core.security import generate_secure_reset_token, hash_password, hash_token
from ..exceptions import PersistenceException
from .exceptions import (
    InvalidOrExpiredTokenException,
    PasswordMismatchException,
    UserNotFoundException
)
from .models import User
from .utils import MailSender, send_password_reset_email

# Set up logging
logger = logging.getLogger(__name__)


class ResetTokenManager:
    """
    Issues and redeems single-use, time-boxed password reset tokens.

    Only the SHA-256 digest of a token is stored on the user; the raw token
    exists in the emailed link alone. Redemption clears both reset fields,
    so a token can be used once.
    """

    def __init__(self, settings: Settings):
        self.reset_base_url = settings.frontend_url.rstrip("/")
        self.lifetime = timedelta(minutes=settings.reset_token_expire_minutes)

    def build_reset_url(self, reset_token: str) -> str:
        return f"{self.reset_base_url}/reset?{urlencode({'resetToken': reset_token})}"

    def request_reset(
        self,
        db: Session,
        email: str,
        mail_sender: MailSender,
        background_tasks: BackgroundTasks
    ) -> Dict[str, Any]:
        """
        Set a reset token on the user and email them the link.

        The email is queued as a background task after the token is
        committed; a failed send does not undo the token.

        Args:
            db: Database session
            email: Exact email of the account
            mail_sender: Sender for the reset email
            background_tasks: Queue the email is scheduled on

        Returns:
            Dict with an acknowledgement message

        Raises:
            UserNotFoundException: If no user has that email
            PersistenceException: If the token cannot be stored
        """
        user = db.query(User).filter(User.email == email).first()
        if not user:
            logger.warning(f"Password reset requested for unknown email {email}")
            raise UserNotFoundException(f"No such user found for email {email}")

        reset_token = generate_secure_reset_token()
        expires_at = datetime.now(timezone.utc) + self.lifetime
        user.reset_token = hash_token(reset_token)
        user.reset_token_expiry = expires_at

        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to store reset token for user {user.id}: {str(e)}")
            raise PersistenceException()

        logger.info(f"Password reset token issued for user {user.id}")
        background_tasks.add_task(
            send_password_reset_email,
            mail_sender,
            user.email,
            user.first_name,
            self.build_reset_url(reset_token),
            expires_at
        )
        return {"message": "Thanks!"}

    def redeem(self, db: Session, reset_token: str, password: str, confirm_password: str) -> User:
        """
        Set a new password using a reset token.

        Args:
            db: Database session
            reset_token: Raw token from the reset link
            password: New password
            confirm_password: Confirmation of the new password

        Returns:
            User: The updated user

        Raises:
            PasswordMismatchException: If the passwords differ (checked before any lookup)
            InvalidOrExpiredTokenException: If no user holds the token or it has expired
            PersistenceException: If the new password cannot be stored
        """
        if password != confirm_password:
            raise PasswordMismatchException()

        now = datetime.now(timezone.utc)
        user = (
            db.query(User)
            .filter(User.reset_token == hash_token(reset_token), User.reset_token_expiry >= now)
            .first()
        )
        if not user:
            logger.warning("Password reset failed: token invalid or expired")
            raise InvalidOrExpiredTokenException()

        user.password_hash = hash_password(password)
        user.reset_token = None
        user.reset_token_expiry = None

        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to reset password for user {user.id}: {str(e)}")
            raise PersistenceException()

        db.refresh(user)
        logger.info(f"Password reset successful for user {user.id}")
        return user
