"""
User Model - Stores portal accounts, credentials and session/reset state.
"""
from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from ..database import Base

class UserRole(str, enum.Enum):
    """
    Enumeration for user roles in the portal.

    Roles:
    - VISITOR: Placeholder account created by an anonymous flow, may later register
    - PATIENT: Fully registered portal user
    """
    VISITOR = "VISITOR"
    PATIENT = "PATIENT"

class User(Base):
    """
    User Model - Stores all user information in the portal

    Fields:
    - id: Primary key for user identification
    - email: Unique email address, always stored lowercase
    - password_hash: Securely hashed password (never store raw passwords)
    - role: VISITOR placeholder or registered PATIENT
    - first_name / last_name / telephone: Optional profile fields
    - token_generation: Bumped to invalidate every refresh token issued before
    - reset_token: Digest of the outstanding password reset token
    - reset_token_expiry: When the outstanding reset token stops being accepted
    - created_at: Timestamp when user was created
    - updated_at: Timestamp when user was last updated
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.PATIENT, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    telephone = Column(String, nullable=True)
    token_generation = Column(Integer, default=0, nullable=False)
    reset_token = Column(String, nullable=True, index=True)
    reset_token_expiry = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    credit_cards = relationship("CreditCard", back_populates="user")
    addresses = relationship("Address", back_populates="user")
    visits = relationship("Visit", back_populates="user")

    def __repr__(self):
        """String representation of the User model"""
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
