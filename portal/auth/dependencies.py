"""
FastAPI dependencies for the request context and auth collaborators.

The caller's identity is resolved once per request from the access-token
cookie into a RequestContext, which is then passed explicitly into every
service call that needs it.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..config import settings
from ..core.cookies import ACCESS_TOKEN_COOKIE, SessionCookieWriter
from ..core.security import TokenIssuer
from ..database import get_db
from .models import User
from .reset import ResetTokenManager
from .utils import MailSender


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, resolved from a verified access token."""
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(settings)

def get_cookie_writer() -> SessionCookieWriter:
    return SessionCookieWriter(settings)

def get_mail_sender() -> MailSender:
    return MailSender(settings)

def get_reset_manager() -> ResetTokenManager:
    return ResetTokenManager(settings)

def get_request_context(
    request: Request,
    token_issuer: TokenIssuer = Depends(get_token_issuer)
) -> RequestContext:
    """
    Build the request context from the access-token cookie.

    A missing, expired or tampered token yields an anonymous context rather
    than an error; operations that need a user reject it themselves.

    Args:
        request: Incoming request
        token_issuer: Verifier for access tokens

    Returns:
        RequestContext: Context carrying the verified user id, if any
    """
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    return RequestContext(user_id=token_issuer.verify_access_token(token))

def get_current_user(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
) -> User:
    """
    Get the authenticated user for routes that always need one.

    Raises:
        NotAuthenticatedException: If no session resolves
        UserNotFoundException: If the session's user no longer exists
    """
    from .service import validate_user
    return validate_user(db, ctx)
