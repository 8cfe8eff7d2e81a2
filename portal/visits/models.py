"""
Visit Model - Intake visits started by portal users.

A visit begins as a TEMPORARY draft that the user keeps editing; each user
has at most one draft per visit type. Confirmation happens elsewhere.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Index, JSON, func, text
from sqlalchemy.orm import relationship
import enum
from ..database import Base

class VisitStatus(str, enum.Enum):
    """
    Lifecycle of a visit.

    - TEMPORARY: Draft being filled in by the user
    - CONFIRMED: Submitted for care
    - CANCELLED: Abandoned or withdrawn
    """
    TEMPORARY = "TEMPORARY"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"

class Visit(Base):
    """
    Visit Model

    Fields:
    - id: Primary key
    - user_id: Owner of the visit
    - type: Intake category
    - status: Lifecycle status
    - questionnaire: Intake answers as JSON
    - telephone: Contact number for this visit
    - created_at / updated_at: Timestamps
    """
    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)
    status = Column(Enum(VisitStatus), default=VisitStatus.TEMPORARY, nullable=False)
    questionnaire = Column(JSON, nullable=True)
    telephone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # One draft per user and visit type
    __table_args__ = (
        Index(
            "uq_visits_user_type_temporary",
            user_id,
            type,
            unique=True,
            sqlite_where=text("status = 'TEMPORARY'"),
            postgresql_where=text("status = 'TEMPORARY'"),
        ),
    )

    user = relationship("User", back_populates="visits")

    def __repr__(self):
        """String representation of the Visit model"""
        return f"<Visit(id={self.id}, user_id={self.user_id}, type='{self.type}', status='{self.status}')>"
