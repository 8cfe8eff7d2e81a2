"""
Core security utilities for password hashing, session tokens and reset tokens.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
import secrets
import hashlib
import logging

from ..config import Settings

# Set up logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bytes of randomness in a password reset token (hex-encoded to twice this length)
RESET_TOKEN_BYTES = 20

def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    return pwd_context.verify(plain_password, hashed_password)

def generate_secure_reset_token() -> str:
    """
    Generate a secure token for password reset.

    Returns:
        str: Hex-encoded random token
    """
    return secrets.token_hex(RESET_TOKEN_BYTES)

def hash_token(token: str) -> str:
    """
    Hash a token for secure storage.

    Args:
        token: Token to hash

    Returns:
        str: Hashed token
    """
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass(frozen=True)
class SessionTokens:
    """Access/refresh token pair minted for one login."""
    access_token: str
    refresh_token: str


class TokenIssuer:
    """
    Mints and verifies session tokens.

    Access tokens carry only the user id and are signed with the access
    secret. Refresh tokens also carry the user's token generation and are
    signed with the separate refresh secret; bumping the generation on the
    user row makes every earlier refresh token fail verification. Access
    tokens are not checked against the generation and stay usable until
    they expire.
    """

    def __init__(self, settings: Settings):
        self.access_secret = settings.access_token_secret
        self.refresh_secret = settings.refresh_token_secret
        self.algorithm = settings.algorithm
        self.access_lifetime = timedelta(minutes=settings.access_token_expire_minutes)
        self.refresh_lifetime = timedelta(days=settings.refresh_token_expire_days)

    def create_access_token(self, user) -> str:
        expire = datetime.now(timezone.utc) + self.access_lifetime
        claims = {"user_id": user.id, "type": "access", "exp": expire}
        return jwt.encode(claims, self.access_secret, algorithm=self.algorithm)

    def create_refresh_token(self, user) -> str:
        expire = datetime.now(timezone.utc) + self.refresh_lifetime
        claims = {
            "user_id": user.id,
            "generation": user.token_generation,
            "type": "refresh",
            "exp": expire,
        }
        return jwt.encode(claims, self.refresh_secret, algorithm=self.algorithm)

    def issue(self, user) -> SessionTokens:
        """
        Issue a fresh access/refresh pair for a user.

        Args:
            user: User the tokens are bound to

        Returns:
            SessionTokens: Independently signed access and refresh tokens
        """
        return SessionTokens(
            access_token=self.create_access_token(user),
            refresh_token=self.create_refresh_token(user),
        )

    def _decode(self, token: str, secret: str, expected_type: str) -> Optional[Dict[str, Any]]:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError:
            return None
        if payload.get("type") != expected_type or payload.get("user_id") is None:
            return None
        return payload

    def verify_access_token(self, token: Optional[str]) -> Optional[int]:
        """
        Verify an access token.

        Args:
            token: Encoded access token, possibly missing

        Returns:
            The user id the token was issued to, or None if it is invalid or expired
        """
        if not token:
            return None
        payload = self._decode(token, self.access_secret, "access")
        return payload["user_id"] if payload else None

    def decode_refresh_token(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        """Return refresh token claims if the signature and expiry check out."""
        if not token:
            return None
        return self._decode(token, self.refresh_secret, "refresh")

    def verify_refresh_token(self, token: Optional[str], user) -> bool:
        """
        Verify a refresh token against the user's current generation.

        Args:
            token: Encoded refresh token
            user: User loaded from the store

        Returns:
            bool: True only if the token is valid, belongs to the user and
            was issued at the user's current generation
        """
        payload = self.decode_refresh_token(token)
        if not payload or payload["user_id"] != user.id:
            return False
        return payload.get("generation") == user.token_generation
