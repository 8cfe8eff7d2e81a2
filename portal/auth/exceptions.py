"""
Authentication-specific exceptions.
"""
from fastapi import HTTPException, status

class AuthException(HTTPException):
    """Base class for authentication exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class NotAuthenticatedException(AuthException):
    """Exception raised when an operation needs a session and none resolves."""
    def __init__(self, detail: str = "You must be logged in to do this"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class UserNotFoundException(AuthException):
    """Exception raised when the referenced user does not exist."""
    def __init__(self, detail: str = "User not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class InvalidCredentialsException(AuthException):
    """
    Exception raised when login fails.

    Unknown email and wrong password share this exception and its detail.
    """
    def __init__(self):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

class PasswordMismatchException(AuthException):
    """Exception raised when password and confirmation differ."""
    def __init__(self, detail: str = "Passwords don't match"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class InvalidOrExpiredTokenException(AuthException):
    """
    Exception raised when a reset token cannot be redeemed.

    Wrong and expired tokens share this exception and its detail.
    """
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="This token is either invalid or expired")
