"""
Authentication service layer for business logic.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.cookies import SessionCookieWriter
from ..core.security import TokenIssuer, hash_password, verify_password
from ..exceptions import PersistenceException
from .dependencies import RequestContext
from .exceptions import (
    InvalidCredentialsException,
    NotAuthenticatedException,
    UserNotFoundException
)
from .models import User, UserRole
from .reset import ResetTokenManager
from .schemas import UserRegistration
from .utils import MailSender

# Set up logging
logger = logging.getLogger(__name__)

def validate_user(db: Session, ctx: RequestContext) -> User:
    """
    Resolve the caller's user for operations that require a session.

    Args:
        db: Database session
        ctx: Request context

    Returns:
        User: The authenticated user

    Raises:
        NotAuthenticatedException: If the context carries no user
        UserNotFoundException: If the user no longer exists
    """
    if not ctx.is_authenticated:
        raise NotAuthenticatedException()
    user = db.query(User).filter(User.id == ctx.user_id).first()
    if not user:
        raise UserNotFoundException(f"Can't find user ID: {ctx.user_id}")
    return user

def start_session(
    user: User,
    token_issuer: TokenIssuer,
    cookie_writer: SessionCookieWriter,
    response: Response
) -> None:
    """Issue a token pair for the user and set it as cookies on the response."""
    cookie_writer.attach(response, token_issuer.issue(user))

def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {str(e)}")
        raise PersistenceException()

async def register_user(
    db: Session,
    registration: UserRegistration,
    token_issuer: TokenIssuer,
    cookie_writer: SessionCookieWriter,
    response: Response
) -> Dict[str, Any]:
    """
    Register a user, or upgrade a visitor placeholder to a full account.

    Args:
        db: Database session
        registration: Submitted registration data
        token_issuer: Issuer for the new session
        cookie_writer: Writer for the session cookies
        response: Response the cookies are set on

    Returns:
        Dict with message "OK" (session started) or "EXISTS" (email belongs
        to a registered patient; nothing changed)

    Raises:
        PersistenceException: If the user cannot be stored
    """
    email = registration.email.lower()
    existing_user = db.query(User).filter(User.email == email).first()
    password_hash = hash_password(registration.password)

    if existing_user and existing_user.role == UserRole.PATIENT:
        logger.warning(f"Registration refused: {email} already registered")
        return {"message": "EXISTS"}

    if existing_user:
        # Visitor placeholder: fill in the same row
        profile = registration.model_dump(exclude={"email", "password", "role"}, exclude_unset=True)
        for field, value in profile.items():
            setattr(existing_user, field, value)
        existing_user.password_hash = password_hash
        existing_user.role = registration.role
        user = existing_user
        _commit(db, f"upgrade visitor {email}")
        logger.info(f"Visitor {user.id} upgraded to {user.role.value}")
    else:
        user = User(
            email=email,
            password_hash=password_hash,
            role=registration.role,
            first_name=registration.first_name,
            last_name=registration.last_name,
            telephone=registration.telephone
        )
        db.add(user)
        _commit(db, f"create user {email}")
        logger.info(f"User account created: {user.id}")

    db.refresh(user)
    start_session(user, token_issuer, cookie_writer, response)
    return {"message": "OK"}

async def login_user(
    db: Session,
    email: str,
    password: str,
    token_issuer: TokenIssuer,
    cookie_writer: SessionCookieWriter,
    response: Response
) -> User:
    """
    Authenticate a user and start a session.

    Args:
        db: Database session
        email: User's email address
        password: User's password
        token_issuer: Issuer for the session tokens
        cookie_writer: Writer for the session cookies
        response: Response the cookies are set on

    Returns:
        User: The authenticated user

    Raises:
        InvalidCredentialsException: If the email is unknown or the password is wrong
    """
    email = email.lower()
    user = db.query(User).filter(User.email == email).first()

    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Login failed: Invalid credentials for {email}")
        raise InvalidCredentialsException()

    start_session(user, token_issuer, cookie_writer, response)
    logger.info(f"Login successful: User {user.id}")
    return user

async def logout_user(cookie_writer: SessionCookieWriter, response: Response) -> bool:
    """
    Drop the session cookies.

    Issued tokens stay valid until they expire; pair with invalidate_tokens
    to revoke refresh tokens server-side.
    """
    cookie_writer.clear(response)
    return True

async def refresh_session(
    db: Session,
    refresh_token: Optional[str],
    token_issuer: TokenIssuer,
    cookie_writer: SessionCookieWriter,
    response: Response
) -> User:
    """
    Issue a new access token from a refresh token.

    Args:
        db: Database session
        refresh_token: Refresh token from the request cookie
        token_issuer: Verifier and issuer for tokens
        cookie_writer: Writer for the access cookie
        response: Response the cookie is set on

    Returns:
        User: The user the session belongs to

    Raises:
        NotAuthenticatedException: If the refresh token is missing, invalid,
            expired, or was issued before the user's last invalidation
    """
    claims = token_issuer.decode_refresh_token(refresh_token)
    if not claims:
        raise NotAuthenticatedException("Invalid or expired session")

    user = db.query(User).filter(User.id == claims["user_id"]).first()
    if not user or not token_issuer.verify_refresh_token(refresh_token, user):
        logger.warning(f"Refresh rejected for user {claims['user_id']}: stale or unknown session")
        raise NotAuthenticatedException("Invalid or expired session")

    cookie_writer.attach_access(response, token_issuer.create_access_token(user))
    logger.info(f"Access token refreshed for user {user.id}")
    return user

async def invalidate_tokens(
    db: Session,
    ctx: RequestContext,
    cookie_writer: SessionCookieWriter,
    response: Response
) -> bool:
    """
    Invalidate every refresh token issued to the caller so far.

    The user's token generation is incremented in a single UPDATE so
    concurrent calls cannot lose an increment. Access tokens already issued
    remain valid until they expire.

    Args:
        db: Database session
        ctx: Request context of the caller
        cookie_writer: Writer used to clear the access cookie
        response: Response the cookie is cleared on

    Returns:
        bool: True when the generation was bumped, False if the user is gone

    Raises:
        NotAuthenticatedException: If the caller has no session
        PersistenceException: If the bump cannot be stored
    """
    if not ctx.is_authenticated:
        raise NotAuthenticatedException()

    user = db.query(User).filter(User.id == ctx.user_id).first()
    if not user:
        logger.warning(f"Token invalidation for missing user {ctx.user_id}")
        return False

    try:
        db.query(User).filter(User.id == user.id).update(
            {User.token_generation: User.token_generation + 1},
            synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to invalidate tokens for user {user.id}: {str(e)}")
        raise PersistenceException()

    cookie_writer.clear_access(response)
    logger.info(f"Refresh tokens invalidated for user {user.id}")
    return True

async def request_password_reset(
    db: Session,
    email: str,
    reset_manager: ResetTokenManager,
    mail_sender: MailSender,
    background_tasks: BackgroundTasks
) -> Dict[str, Any]:
    """Start a password reset; see ResetTokenManager.request_reset."""
    return reset_manager.request_reset(db, email, mail_sender, background_tasks)

async def reset_password(
    db: Session,
    reset_token: str,
    password: str,
    confirm_password: str,
    reset_manager: ResetTokenManager,
    token_issuer: TokenIssuer,
    cookie_writer: SessionCookieWriter,
    response: Response
) -> User:
    """
    Redeem a reset token and start a new session.

    Raises:
        PasswordMismatchException: If the passwords differ
        InvalidOrExpiredTokenException: If the token is wrong or expired
    """
    user = reset_manager.redeem(db, reset_token, password, confirm_password)
    start_session(user, token_issuer, cookie_writer, response)
    return user
