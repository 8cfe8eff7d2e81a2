"""
User Schemas - Pydantic models for auth request validation and serialization.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
from .models import UserRole

class UserRegistration(BaseModel):
    """
    Registration Schema - Used when a user registers or upgrades a visitor account

    Fields:
    - email: User's email address (lowercased before lookup)
    - password: User's plain text password (hashed before storage)
    - role: Role to register as, PATIENT unless stated otherwise
    - first_name / last_name / telephone: Optional profile fields
    """
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.PATIENT
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    telephone: Optional[str] = None

class UserLogin(BaseModel):
    """
    User Login Schema - Used for authentication

    Fields:
    - email: User's email address
    - password: User's plain text password
    """
    email: EmailStr
    password: str

class PasswordResetRequest(BaseModel):
    """
    Password Reset Request Schema

    Fields:
    - email: Email of the account to reset
    """
    email: EmailStr

class PasswordReset(BaseModel):
    """
    Password Reset Schema - Redeems a reset token

    Fields:
    - reset_token: Token received via email
    - password: New password
    - confirm_password: Must equal password
    """
    reset_token: str
    password: str = Field(..., min_length=1)
    confirm_password: str

class MessageResponse(BaseModel):
    """Status message returned by register and reset requests."""
    message: str

class UserResponse(BaseModel):
    """
    User Response Schema - Public view of a user

    Never includes the password hash, reset token or token generation.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    telephone: Optional[str] = None
    created_at: Optional[datetime] = None
