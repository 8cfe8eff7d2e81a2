"""
Session cookie transport for issued tokens.
"""
from fastapi import Response

from ..config import Settings
from .security import SessionTokens

ACCESS_TOKEN_COOKIE = "access-token"
REFRESH_TOKEN_COOKIE = "refresh-token"


class SessionCookieWriter:
    """
    Attaches and removes the httpOnly session cookies on a response.

    Clearing cookies only drops the client's copy; it revokes nothing.
    Server-side revocation is the token generation bump.
    """

    def __init__(self, settings: Settings):
        self.secure = settings.cookie_secure
        self.access_max_age = settings.access_token_expire_minutes * 60
        self.refresh_max_age = settings.refresh_token_expire_days * 24 * 60 * 60

    def _set(self, response: Response, key: str, value: str, max_age: int):
        response.set_cookie(
            key=key,
            value=value,
            max_age=max_age,
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def attach(self, response: Response, tokens: SessionTokens):
        self._set(response, ACCESS_TOKEN_COOKIE, tokens.access_token, self.access_max_age)
        self._set(response, REFRESH_TOKEN_COOKIE, tokens.refresh_token, self.refresh_max_age)

    def attach_access(self, response: Response, access_token: str):
        self._set(response, ACCESS_TOKEN_COOKIE, access_token, self.access_max_age)

    def clear_access(self, response: Response):
        response.delete_cookie(ACCESS_TOKEN_COOKIE, httponly=True, secure=self.secure, samesite="lax")

    def clear(self, response: Response):
        self.clear_access(response)
        response.delete_cookie(REFRESH_TOKEN_COOKIE, httponly=True, secure=self.secure, samesite="lax")
