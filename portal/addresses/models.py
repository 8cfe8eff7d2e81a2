"""
Address Model - Postal addresses saved by portal users.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from ..database import Base

# Columns that make up an address's content; equal content means the same address
ADDRESS_FIELDS = ("address_one", "address_two", "city", "state", "zipcode", "telephone")

class Address(Base):
    """
    Address Model

    Fields:
    - id: Primary key
    - user_id: Owner of the address
    - address_one / address_two: Street lines
    - city, state, zipcode: Locality
    - telephone: Contact number for this address
    - active: Whether this is the owner's current address
    - created_at: When the address was first saved
    """
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    address_one = Column(String, nullable=False)
    address_two = Column(String, nullable=True)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    zipcode = Column(String, nullable=False)
    telephone = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # At most one active address per user
    __table_args__ = (
        Index(
            "uq_addresses_user_active",
            user_id,
            unique=True,
            sqlite_where=active == True,  # noqa: E712
            postgresql_where=active == True,  # noqa: E712
        ),
    )

    user = relationship("User", back_populates="addresses")

    def __repr__(self):
        """String representation of the Address model"""
        return f"<Address(id={self.id}, user_id={self.user_id}, city='{self.city}', active={self.active})>"
