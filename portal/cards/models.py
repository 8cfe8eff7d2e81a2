"""
Credit Card Model - Stores tokenized cards saved by portal users.

Only the gateway token and a masked display number are stored, never the PAN.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from ..database import Base

class CreditCard(Base):
    """
    CreditCard Model

    Fields:
    - id: Primary key
    - user_id: Owner of the card
    - cc_type: Card brand reported by the gateway
    - cc_token: Opaque gateway reference used for charges
    - cc_number: Masked card number for display
    - cc_expire: Expiration as submitted (MMYY)
    - active: Whether this is the owner's current card
    - created_at: When the card was saved
    """
    __tablename__ = "credit_cards"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    cc_type = Column(String, nullable=True)
    cc_token = Column(String, nullable=False)
    cc_number = Column(String, nullable=False)
    cc_expire = Column(String, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # At most one active card per user
    __table_args__ = (
        Index(
            "uq_credit_cards_user_active",
            user_id,
            unique=True,
            sqlite_where=active == True,  # noqa: E712
            postgresql_where=active == True,  # noqa: E712
        ),
    )

    user = relationship("User", back_populates="credit_cards")

    def __repr__(self):
        """String representation of the CreditCard model"""
        return f"<CreditCard(id={self.id}, user_id={self.user_id}, number='{self.cc_number}', active={self.active})>"
