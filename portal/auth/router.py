"""
Authentication routes for the patient portal.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session
import logging

from ..core.cookies import REFRESH_TOKEN_COOKIE, SessionCookieWriter
from ..core.security import TokenIssuer
from ..database import get_db
from ..exceptions import AppException
from .dependencies import (
    RequestContext,
    get_cookie_writer,
    get_current_user,
    get_mail_sender,
    get_request_context,
    get_reset_manager,
    get_token_issuer
)
from .exceptions import AuthException
from .models import User
from .reset import ResetTokenManager
from .schemas import (
    MessageResponse,
    PasswordReset,
    PasswordResetRequest,
    UserLogin,
    UserRegistration,
    UserResponse
)
from .service import (
    invalidate_tokens,
    login_user,
    logout_user,
    refresh_session,
    register_user,
    request_password_reset,
    reset_password
)
from .utils import MailSender

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter()

def _unexpected(action: str, e: Exception) -> HTTPException:
    logger.error(f"Unexpected error during {action}: {str(e)}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"An unexpected error occurred during {action}"
    )

@router.post("/register", response_model=MessageResponse, summary="Register or Upgrade Visitor Account")
async def register_route(
    registration: UserRegistration,
    response: Response,
    db: Session = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    cookie_writer: SessionCookieWriter = Depends(get_cookie_writer)
):
    """
    Registration endpoint.

    Creates a new account, or completes a visitor placeholder with the same
    email. Session cookies are set when the message is OK. An email that
    already belongs to a patient yields message EXISTS and no cookies.
    """
    try:
        return await register_user(db, registration, token_issuer, cookie_writer, response)
    except (AuthException, AppException):
        raise
    except Exception as e:
        raise _unexpected("registration", e)

@router.post("/login", response_model=UserResponse, summary="User Login")
async def login_route(
    login_data: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    cookie_writer: SessionCookieWriter = Depends(get_cookie_writer)
):
    """
    User login endpoint.

    Sets the access-token and refresh-token cookies and returns the user.
    Unknown email and wrong password produce the same 401.
    """
    try:
        return await login_user(db, login_data.email, login_data.password, token_issuer, cookie_writer, response)
    except (AuthException, AppException):
        raise
    except Exception as e:
        raise _unexpected("login", e)

@router.post("/logout", response_model=bool, summary="User Logout")
async def logout_route(
    response: Response,
    cookie_writer: SessionCookieWriter = Depends(get_cookie_writer)
):
    """
    Logout endpoint.

    Clears both session cookies. Tokens are not revoked; use
    /invalidate-tokens for that.
    """
    return await logout_user(cookie_writer, response)

@router.post("/refresh", response_model=UserResponse, summary="Refresh Access Token")
async def refresh_route(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    cookie_writer: SessionCookieWriter = Depends(get_cookie_writer)
):
    """
    Issue a new access-token cookie from the refresh-token cookie.

    Refresh tokens minted before the user's last invalidation are rejected.
    """
    try:
        return await refresh_session(
            db,
            request.cookies.get(REFRESH_TOKEN_COOKIE),
            token_issuer,
            cookie_writer,
            response
        )
    except (AuthException, AppException):
        raise
    except Exception as e:
        raise _unexpected("token refresh", e)

@router.post("/invalidate-tokens", response_model=bool, summary="Invalidate All Refresh Tokens")
async def invalidate_tokens_route(
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    cookie_writer: SessionCookieWriter = Depends(get_cookie_writer)
):
    """
    Invalidate every refresh token issued to the caller and clear the access cookie.

    Returns false if the caller's user no longer exists.
    """
    try:
        return await invalidate_tokens(db, ctx, cookie_writer, response)
    except (AuthException, AppException):
        raise
    except Exception as e:
        raise _unexpected("token invalidation", e)

@router.post("/request-reset", response_model=MessageResponse, summary="Request Password Reset")
async def request_reset_route(
    reset_request: PasswordResetRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    reset_manager: ResetTokenManager = Depends(get_reset_manager),
    mail_sender: MailSender = Depends(get_mail_sender)
):
    """
    Email a password reset link to the account with this exact email.
    """
    try:
        return await request_password_reset(db, reset_request.email, reset_manager, mail_sender, background_tasks)
    except (AuthException, AppException):
        raise
    except Exception as e:
        raise _unexpected("password reset request", e)

@router.post("/reset-password", response_model=UserResponse, summary="Reset Password with Token")
async def reset_password_route(
    reset_data: PasswordReset,
    response: Response,
    db: Session = Depends(get_db),
    reset_manager: ResetTokenManager = Depends(get_reset_manager),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    cookie_writer: SessionCookieWriter = Depends(get_cookie_writer)
):
    """
    Redeem a reset token, set the new password and start a new session.
    """
    try:
        return await reset_password(
            db,
            reset_data.reset_token,
            reset_data.password,
            reset_data.confirm_password,
            reset_manager,
            token_issuer,
            cookie_writer,
            response
        )
    except (AuthException, AppException):
        raise
    except Exception as e:
        raise _unexpected("password reset", e)

@router.get("/me", response_model=UserResponse, summary="Get Current User Profile")
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """
    Get current user profile endpoint.
    """
    return current_user
